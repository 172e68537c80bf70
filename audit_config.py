import os

from dotenv import load_dotenv

load_dotenv()


def env_number(name, default, cast=float):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r} (check your environment or .env)") from None


# Where the per-URL JSON reports land. Wiped at the start of every run.
RESULTS_DIR = os.getenv("RESULTS_DIR", "results")

URL_SCHEME = "https://"

FILLER_CHAR = "_"

# Lighthouse CLI (npm install -g lighthouse)
LIGHTHOUSE_PATH = os.getenv("LIGHTHOUSE_PATH", "lighthouse")

# Seconds; unset or 0 means wait for Lighthouse indefinitely
LIGHTHOUSE_TIMEOUT = env_number("LIGHTHOUSE_TIMEOUT", "0", int) or None

CHROME_FLAGS = os.getenv(
    "CHROME_FLAGS",
    "--no-sandbox --disable-gpu --disable-dev-shm-usage",
).split()

# How long to wait for the DevTools endpoint after launch (seconds)
ENDPOINT_TIMEOUT = env_number("ENDPOINT_TIMEOUT", "10")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
