import pytest


@pytest.fixture(autouse=True)
def no_reverse_geocode_delay(monkeypatch):
    monkeypatch.setattr("app.config.REVERSE_GEOCODE_DELAY_S", 0)


@pytest.fixture
def usgs_feature():
    def build(event_id="nc75095651", mag=3.4, lon=-122.8, lat=38.8, depth=2.1):
        return {
            "type": "Feature",
            "id": event_id,
            "properties": {
                "mag": mag,
                "place": "5km NW of The Geysers, CA",
                "time": 1700000000000,
                "url": f"https://earthquake.usgs.gov/earthquakes/eventpage/{event_id}",
                "title": f"M {mag} - 5km NW of The Geysers, CA",
                "tsunami": 0,
                "type": "earthquake",
                "magType": "md",
            },
            "geometry": {"type": "Point", "coordinates": [lon, lat, depth]},
        }

    return build


@pytest.fixture
def reverse_payload():
    return {
        "display_name": "Sonoma County, California, United States",
        "address": {
            "county": "Sonoma County",
            "state": "California",
            "country": "United States",
            "country_code": "us",
        },
        "lat": "38.8",
        "lon": "-122.8",
    }
