"""
Design (config.py)
- Purpose: Centralize constants and configuration.
- Inputs: HOSTWATCH_LOG_LEVEL environment variable (optional).
- Outputs: Constants (ports, ranges, intervals, thresholds, notification text).
- Side effects: None.
- Thread-safety: N/A (read-only constants).
"""

import os

# Subnet to scan when no physical interface can be found
DEFAULT_SUBNET = "192.168.1."

# Operator override: "A.B.C." (shorter than an IPv4 dotted-quad buffer)
SUBNET_SEPARATOR = "."
SUBNET_MAX_LEN = 16

# Interface name prefixes treated as physical (wired / wireless) NICs
POSIX_INTERFACE_PATTERNS = ("en", "eth", "wl")
WINDOWS_INTERFACE_PATTERNS = ("Ethernet", "Wi-Fi", "WLAN", "Wireless")

# Synthetic host appended after discovery to track internet reachability
INTERNET_CHECK_IP = "8.8.8.8"
INTERNET_HOSTNAME = "INTERNET"
HOSTNAME_NOT_AVAILABLE = "N/A"

## Discovery
START_HOST = 1
END_HOST = 254
NUM_WORKERS = 50
COMMON_PORTS = (21, 22, 23, 80, 443, 445, 3389, 8080)
CONNECT_TIMEOUT_MS = 200

## Monitoring
MONITOR_INTERVAL_SEC = 5
CHECKPOINT_SEC = 0.1      # upper bound on shutdown latency
FAIL_THRESHOLD = 3        # consecutive failed rounds before DOWN

## Alerts
ENABLE_NOTIFICATIONS = True
NOTIFY_TITLE = "Network Host Monitor"
NOTIFY_MESSAGE = "A monitored host is DOWN"
NOTIFY_TIMEOUT_SEC = 5

## Logging
LOG_LEVEL = os.environ.get("HOSTWATCH_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "[%(asctime)s] %(levelname)-7s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
