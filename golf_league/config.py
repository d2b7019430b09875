import logging
import os

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./golf_league.db")

ENVIRONMENT = os.environ.get("ENVIRONMENT", "production")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

VALID_ENVIRONMENTS = ("dev", "staging", "production")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


# ---------------------------------------------------------------------------
# League rules
# ---------------------------------------------------------------------------

HOLES_PER_ROUND = 9
HANDICAP_ALLOWANCE = 0.95

# best 3 of the last 5 differentials
SCORES_USED = 3
SCORES_CONSIDERED = 5
ESTABLISHED_ROUNDS = 5

FLUFF_MAX_INCHES = 3.0
GIMME_MAX_FEET = 2.0


def validate():
    if ENVIRONMENT not in VALID_ENVIRONMENTS:
        raise RuntimeError(
            f"ENVIRONMENT must be one of {', '.join(VALID_ENVIRONMENTS)} (got {ENVIRONMENT!r})"
        )
    if LOG_LEVEL not in VALID_LOG_LEVELS:
        raise RuntimeError(
            f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)} (got {LOG_LEVEL!r})"
        )


def setup_logging(level: str | None = None):
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
