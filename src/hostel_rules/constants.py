"""Constants for the hostel rules engine."""

# Canonical genders
GENDER_MALE = "Male"
GENDER_FEMALE = "Female"
GENDERS = [GENDER_MALE, GENDER_FEMALE]

# Gender aliases accepted at the input boundary (compared lowercase)
GENDER_ALIASES = {
    "male": GENDER_MALE,
    "m": GENDER_MALE,
    "boy": GENDER_MALE,
    "boys": GENDER_MALE,
    "female": GENDER_FEMALE,
    "f": GENDER_FEMALE,
    "girl": GENDER_FEMALE,
    "girls": GENDER_FEMALE,
}

# Room categories, ordered per gender
CATEGORIES_BY_GENDER = {
    GENDER_MALE: ["A+", "A", "B+", "B"],
    GENDER_FEMALE: ["A+", "A", "B", "C"],
}
ALL_CATEGORIES = ["A+", "A", "B+", "B", "C"]

# Hostel-policy overrides: never valid even if a mapping table lists them
FORBIDDEN_CATEGORIES = {
    GENDER_MALE: {"C"},
    GENDER_FEMALE: {"B+"},
}

# Default room mapping (gender -> category -> room numbers)
DEFAULT_ROOM_MAPPING = {
    GENDER_MALE: {
        "A+": ["302", "309", "310", "311", "312"],
        "A": ["303", "304", "305", "306", "308", "320", "324", "325"],
        "B+": ["321"],
        "B": ["314", "315", "316", "317", "322", "323"],
    },
    GENDER_FEMALE: {
        "A+": ["209", "211", "212", "213", "214", "215"],
        "A": ["103", "115", "201", "202", "203", "204", "205", "206", "207", "208", "216", "217"],
        "B": ["101", "102", "104", "105", "106", "108", "109", "111", "112", "114"],
        "C": ["117"],
    },
}

# Course registry: canonical name -> (code, duration in years)
DEFAULT_COURSES = {
    "B.Tech": ("BTECH", 4),
    "Diploma": ("DIPLOMA", 3),
    "Pharmacy": ("PHARMACY", 4),
    "Degree": ("DEGREE", 3),
}

DEFAULT_BRANCHES = {
    "B.Tech": ["CSE", "ECE", "EEE", "MECH", "CIVIL"],
    "Diploma": ["DAIML", "DCSE", "DECE", "DME", "DAP", "D Fisheries", "D Animal Husbandry"],
    "Pharmacy": [
        "B-Pharmacy",
        "Pharm D",
        "Pharm(PB) D",
        "Pharmaceutical Analysis",
        "Pharmaceutics",
        "Pharma Quality Assurance",
    ],
    "Degree": ["Agriculture", "Horticulture", "Food Technology", "Fisheries", "Food Science & Nutrition"],
}

# Course name aliases (compared after uppercasing and collapsing separators)
COURSE_ALIASES = {
    "BTECH": "B.Tech",
    "B TECH": "B.Tech",
    "B.TECH": "B.Tech",
    "B-TECH": "B.Tech",
    "BACHELOR OF TECHNOLOGY": "B.Tech",
    "DIPLOMA": "Diploma",
    "POLYTECHNIC": "Diploma",
    "PHARMACY": "Pharmacy",
    "PHARMA": "Pharmacy",
    "B PHARMACY": "Pharmacy",
    "B.PHARMACY": "Pharmacy",
    "DEGREE": "Degree",
}

DEFAULT_COURSE_DURATION = 4

# Row field names (spreadsheet column headers)
FIELD_NAME = "Name"
FIELD_ROLL_NUMBER = "RollNumber"
FIELD_GENDER = "Gender"
FIELD_COURSE = "Course"
FIELD_BRANCH = "Branch"
FIELD_YEAR = "Year"
FIELD_CATEGORY = "Category"
FIELD_ROOM_NUMBER = "RoomNumber"
FIELD_STUDENT_PHONE = "StudentPhone"
FIELD_PARENT_PHONE = "ParentPhone"
FIELD_EMAIL = "Email"
FIELD_BATCH = "Batch"
FIELD_ACADEMIC_YEAR = "AcademicYear"

ROW_FIELDS = [
    FIELD_NAME,
    FIELD_ROLL_NUMBER,
    FIELD_GENDER,
    FIELD_COURSE,
    FIELD_BRANCH,
    FIELD_YEAR,
    FIELD_CATEGORY,
    FIELD_ROOM_NUMBER,
    FIELD_STUDENT_PHONE,
    FIELD_PARENT_PHONE,
    FIELD_EMAIL,
    FIELD_BATCH,
    FIELD_ACADEMIC_YEAR,
]

REQUIRED_FIELDS = [
    FIELD_NAME,
    FIELD_ROLL_NUMBER,
    FIELD_GENDER,
    FIELD_COURSE,
    FIELD_CATEGORY,
    FIELD_ROOM_NUMBER,
    FIELD_PARENT_PHONE,
    FIELD_BATCH,
    FIELD_ACADEMIC_YEAR,
]

# Editing a field clears the fields that depend on it
DEPENDENT_FIELDS = {
    FIELD_COURSE: [FIELD_BRANCH, FIELD_BATCH],
    FIELD_GENDER: [FIELD_CATEGORY, FIELD_ROOM_NUMBER],
    FIELD_CATEGORY: [FIELD_ROOM_NUMBER],
}

# Regex patterns
PHONE_PATTERN = r"^\d{10}$"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
BATCH_RANGE_PATTERN = r"^(\d{4})\s*-\s*(\d{4})$"
BATCH_YEAR_PATTERN = r"^(\d{4})$"
ACADEMIC_YEAR_PATTERN = r"^(\d{4})-(\d{4})$"

# Numeric bounds
MIN_YEAR_OF_STUDY = 1
MAX_YEAR_OF_STUDY = 10
BARE_BATCH_MIN_YEAR = 2000
BARE_BATCH_MAX_YEAR = 2100
BATCH_START_MIN_YEAR = 2000
BATCH_START_MAX_YEAR = 2030
FALLBACK_BATCH_DURATIONS = {3, 4}

# Batch list generation
BATCH_LIST_START_YEAR = 2022
BATCH_LIST_COUNT = 10

# Academic year window around the current year
ACADEMIC_YEARS_BEFORE = 3
ACADEMIC_YEARS_AFTER = 3

# Default tariffs (same currency unit as stored rates)
DEFAULT_STAFF_DAILY_RATE = 100
DEFAULT_MONTHLY_FIXED_AMOUNT = 3000

# Slot identifiers within a room
BED_PREFIX = "B"
LOCKER_PREFIX = "L"
