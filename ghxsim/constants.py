from math import log, pi, tau

VERSION = "0.4.0"

PI = pi
TWO_PI = tau
FOUR_PI_SQUARED = 4.0 * pi**2
LN_10 = log(10.0)

HRS_IN_DAY = 24
SEC_IN_HR = 3600
SEC_IN_DAY = 86400
DAYS_IN_YEAR = 365
SEC_IN_YEAR = SEC_IN_DAY * DAYS_IN_YEAR
HRS_IN_YEAR = HRS_IN_DAY * DAYS_IN_YEAR
MONTHS_IN_YEAR = 12

# load aggregation
HRS_IN_MONTH = 730
AGG = 192  # hours of hourly history kept beyond one month
SUB_AGG = 15  # hours of sub-hourly history kept
MAX_TS_IN_HR = 60

DELTA_TEMP_LIMIT = 100.0

# fluid properties for the design mass flow are evaluated here (C)
DESIGN_FLOW_REF_TEMP = 20.0

# Dittus-Boelter
DB_COEFFICIENT = 0.023
DB_RE_EXPONENT = 0.8
DB_PR_EXPONENT = 0.35

# slinky ring-pair classification offsets, added to the coil diameter (m)
NEAR_FIELD_OFFSET = 2.5
MID_FIELD_OFFSET = 10.0

# slinky response table grid, in log10(t / 1 hr)
SLINKY_LOG_TIME_START = -2.0
SLINKY_LOG_TIME_STEP = 0.25

SLINKY_OUTER_POINTS = 33
SLINKY_INNER_POINTS_SELF = 1089
SLINKY_INNER_POINTS = 561
