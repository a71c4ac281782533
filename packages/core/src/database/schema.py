"""
Schema DDL for the beacon attendance database.

Defines all table structures, constraints, and indexes as a single SQL
string constant. ``DatabaseProvider`` applies it on every start-up, so every
statement is idempotent.

Tables:
    employees            : Registered people and the BLE device they carry
    attendance           : First arrival per employee per calendar day
    employee_detections  : Audit trail of every sighting of a known device
    scanners             : Last time each ESP32 scanner reported
"""

# Complete schema DDL as a single SQL script.
SCHEMA_SQL = """
-- ============================================================================
-- EMPLOYEES: People whose devices are tracked
-- ============================================================================

CREATE TABLE IF NOT EXISTS employees (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    mac_address TEXT NOT NULL UNIQUE,   -- always stored lower-case
    telegram_chat_id INTEGER,
    employee_code TEXT,
    department TEXT,
    work_start_time TEXT NOT NULL DEFAULT '08:00:00',  -- HH:MM:SS, local time
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_employees_chat ON employees(telegram_chat_id);

-- ============================================================================
-- ATTENDANCE: One row per employee per day
-- ============================================================================

CREATE TABLE IF NOT EXISTS attendance (
    id INTEGER PRIMARY KEY,
    employee_id INTEGER NOT NULL,
    check_in_time TIMESTAMP NOT NULL,
    scanner_mac TEXT,
    status TEXT NOT NULL CHECK(status IN ('ontime', 'late')),
    created_date TEXT NOT NULL,          -- YYYY-MM-DD, local calendar day
    FOREIGN KEY (employee_id) REFERENCES employees(id) ON DELETE CASCADE,
    UNIQUE (employee_id, created_date)   -- guards the check-then-create race
);

CREATE INDEX IF NOT EXISTS idx_attendance_date ON attendance(created_date);

-- ============================================================================
-- EMPLOYEE DETECTIONS: Append-only audit of resolved sightings
-- ============================================================================

CREATE TABLE IF NOT EXISTS employee_detections (
    id INTEGER PRIMARY KEY,
    employee_id INTEGER NOT NULL,
    mac_address TEXT NOT NULL,
    scanner_mac TEXT,
    rssi INTEGER,            -- Signal strength (-100 to -30)
    device_type TEXT,
    is_itag03 INTEGER NOT NULL DEFAULT 0,
    is_target_device INTEGER NOT NULL DEFAULT 0,
    device_name TEXT,
    detected_at TIMESTAMP NOT NULL,
    FOREIGN KEY (employee_id) REFERENCES employees(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_detections_employee_time
    ON employee_detections(employee_id, detected_at);

-- ============================================================================
-- SCANNERS: Liveness of the BLE scanners
-- ============================================================================

CREATE TABLE IF NOT EXISTS scanners (
    id INTEGER PRIMARY KEY,
    scanner_mac TEXT NOT NULL UNIQUE,
    last_seen TIMESTAMP NOT NULL
);
"""
