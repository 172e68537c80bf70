import pytest


@pytest.fixture
def lighthouse_report():
    """A trimmed-down Lighthouse result with the fields the summary reads."""
    return {
        "lighthouseVersion": "12.0.0",
        "requestedUrl": "https://example.com",
        "categories": {
            "performance": {"score": 0.87},
        },
        "audits": {
            "first-contentful-paint": {"numericValue": 1200.0},
            "largest-contentful-paint": {"numericValue": 3100.0},
            "cumulative-layout-shift": {"numericValue": 0.02},
            "server-response-time": {"numericValue": 180.4},
        },
    }
