# btp/config.py
# Central place for estimator constants, import column names and sample data.

# Project categories offered by the estimation form and recognised by the assistant.
PROJECT_TYPES = [
    "résidentiel",
    "commercial",
    "industriel",
]

# Environmental multipliers applied in similarity mode (thresholds are strict).
HOT_TEMPERATURE_C = 30
COLD_TEMPERATURE_C = 20
HOT_FACTOR = 1.10
COLD_FACTOR = 0.95

HEAVY_RAIN_DAYS = 10
MODERATE_RAIN_DAYS = 5
HEAVY_RAIN_FACTOR = 1.15
MODERATE_RAIN_FACTOR = 1.05

# Delay-risk formula: extreme heat adds a fixed weight above this temperature.
EXTREME_HEAT_C = 35

# Simple variant weights (rain / heat) and the richer variant's.
SIMPLE_RAIN_RISK_WEIGHT = 20.0
SIMPLE_HEAT_RISK_WEIGHT = 15.0
RICH_RAIN_RISK_WEIGHT = 15.0
RICH_HEAT_RISK_WEIGHT = 10.0

RICH_MIN_DURATION_DAYS = 30
RICH_MIN_DELAY_RISK = 5.0

# Constant risk reported when no type-specific data exists.
FALLBACK_DELAY_RISK = 25.0

# Recommendation triggers.
LARGE_SURFACE_M2 = 500
RISK_MARGIN_THRESHOLD = 30
SMALL_CREW_WORKERS = 10
SMALL_CREW_SURFACE_M2 = 200
LONG_PROJECT_DAYS = 180

REC_RAIN = "Prévoir des protections contre la pluie"
REC_HEAT = "Adapter les horaires de travail pour éviter les heures chaudes"
REC_LARGE_SURFACE = "Considérer une équipe plus importante pour accélérer le projet"
REC_RISK_MARGIN = "Prévoir une marge de sécurité dans le planning"
REC_SMALL_CREW = "Augmenter l'effectif pour respecter les délais sur cette surface"
REC_LONG_PROJECT = "Anticiper l'approvisionnement des matériaux sur la durée du chantier"
REC_FALLBACK = (
    "Utilisation de données générales pour l'estimation "
    "(aucun projet historique du même type, fiabilité réduite)"
)

# Canonical HistoricalProject field -> accepted (lower-cased) header names.
# The canonical snake_case name is always accepted as well.
HEADER_SYNONYMS = {
    "project_type": ["type", "type de chantier"],
    "surface_area": ["surface", "taille du chantier"],
    "worker_count": ["ouvriers", "nombre d'ouvriers"],
    "average_temperature": ["temperature", "conditions météo"],
    "rain_days": ["pluie", "jours de pluie"],
    "materials_cost": ["cout_materiaux", "coût des matériaux"],
    "labor_cost": ["cout_main_oeuvre", "coût de la main d'œuvre"],
    "estimated_duration_days": ["duree_estimee", "durée estimée"],
    "delay_days": ["retards"],
}

# Value used when a numeric column is missing or unparseable.
FIELD_DEFAULTS = {
    "surface_area": 0.0,
    "worker_count": 0,
    "average_temperature": 25.0,
    "rain_days": 0.0,
    "materials_cost": 0.0,
    "labor_cost": 0.0,
    "estimated_duration_days": 0,
    "delay_days": 0,
}

INT_FIELDS = ["worker_count", "estimated_duration_days", "delay_days"]
FLOAT_FIELDS = [
    "surface_area",
    "average_temperature",
    "rain_days",
    "materials_cost",
    "labor_cost",
]

SUPPORTED_TEXT_EXTENSIONS = [".csv", ".txt"]
SUPPORTED_SHEET_EXTENSIONS = [".xlsx"]

# Header line of the downloadable import template.
TEMPLATE_HEADER = [
    "type",
    "surface",
    "ouvriers",
    "temperature",
    "pluie",
    "cout_materiaux",
    "cout_main_oeuvre",
    "duree_estimee",
    "retards",
]

# Reference projects loaded at startup (amounts in FCFA).
SAMPLE_PROJECTS = [
    {
        "project_type": "résidentiel",
        "surface_area": 150,
        "worker_count": 8,
        "average_temperature": 28,
        "rain_days": 5,
        "materials_cost": 25_000_000,
        "labor_cost": 15_000_000,
        "estimated_duration_days": 90,
        "delay_days": 5,
    },
    {
        "project_type": "commercial",
        "surface_area": 500,
        "worker_count": 15,
        "average_temperature": 30,
        "rain_days": 10,
        "materials_cost": 80_000_000,
        "labor_cost": 45_000_000,
        "estimated_duration_days": 180,
        "delay_days": 15,
    },
    {
        "project_type": "industriel",
        "surface_area": 1000,
        "worker_count": 25,
        "average_temperature": 32,
        "rain_days": 8,
        "materials_cost": 150_000_000,
        "labor_cost": 80_000_000,
        "estimated_duration_days": 240,
        "delay_days": 20,
    },
    {
        "project_type": "résidentiel",
        "surface_area": 200,
        "worker_count": 10,
        "average_temperature": 26,
        "rain_days": 3,
        "materials_cost": 35_000_000,
        "labor_cost": 20_000_000,
        "estimated_duration_days": 120,
        "delay_days": 8,
    },
    {
        "project_type": "commercial",
        "surface_area": 300,
        "worker_count": 12,
        "average_temperature": 29,
        "rain_days": 7,
        "materials_cost": 55_000_000,
        "labor_cost": 35_000_000,
        "estimated_duration_days": 150,
        "delay_days": 12,
    },
]

# Risk badge thresholds used by the UI and the assistant.
RISK_HIGH_PERCENT = 50
RISK_MEDIUM_PERCENT = 25

# Plausible ranges for values typed in the chat; anything outside is ignored.
CHAT_MAX_SURFACE_M2 = 1_000_000
CHAT_MAX_WORKERS = 10_000
CHAT_MAX_RAIN_DAYS = 31
CHAT_TEMPERATURE_RANGE_C = (-50, 60)
