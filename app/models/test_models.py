from app.models.earthquake import Address, Earthquake, LocationDetails
from app.models.search import SearchState, clamp_limit


def test_earthquake_accessors(usgs_feature):
    quake = Earthquake.model_validate(usgs_feature(lon=-122.8, lat=38.8, depth=2.1))
    assert quake.longitude == -122.8
    assert quake.latitude == 38.8
    assert quake.depth_km == 2.1
    assert quake.properties.location_details is None


def test_severity_thresholds(usgs_feature):
    assert Earthquake.model_validate(usgs_feature(mag=5.0)).properties.severity == "high"
    assert Earthquake.model_validate(usgs_feature(mag=3.0)).properties.severity == "moderate"
    assert Earthquake.model_validate(usgs_feature(mag=2.9)).properties.severity == "low"


def test_tsunami_alert(usgs_feature):
    feature = usgs_feature()
    feature["properties"]["tsunami"] = 1
    assert Earthquake.model_validate(feature).properties.tsunami_alert


def test_upstream_fields_pass_through(usgs_feature):
    quake = Earthquake.model_validate(usgs_feature())
    data = quake.model_dump(by_alias=True, exclude_none=True)
    assert data["type"] == "Feature"
    assert data["properties"]["magType"] == "md"


def test_with_location_details_leaves_original_untouched(usgs_feature, reverse_payload):
    quake = Earthquake.model_validate(usgs_feature())
    enriched = quake.with_location_details(LocationDetails(**reverse_payload))
    assert quake.properties.location_details is None
    data = enriched.model_dump(by_alias=True)
    assert data["properties"]["locationDetails"]["address"]["country_code"] == "us"


def test_location_details_has_content():
    assert not LocationDetails().has_content
    assert not LocationDetails(address=Address()).has_content
    assert LocationDetails(display_name="Somewhere").has_content
    assert LocationDetails(address=Address(city="Napa")).has_content


def test_clamp_limit():
    assert clamp_limit(0) == 1
    assert clamp_limit(50) == 20
    assert clamp_limit(7) == 7


def test_search_state_defaults():
    state = SearchState.from_query({})
    assert state.lat == 37.7749
    assert state.lng == -122.4194
    assert state.radius == 10
    assert state.limit == 20
    assert state.mode == "coordinates"


def test_search_state_bad_numbers_fall_back():
    state = SearchState.from_query({"lat": "abc", "radius": "", "limit": "x"})
    assert state.lat == 37.7749
    assert state.radius == 10
    assert state.limit == 20


def test_search_state_place_query():
    state = SearchState.from_query({"place": " Tokyo ", "limit": "99", "radius": "50"})
    assert state.mode == "place"
    assert state.to_query() == {"place": "Tokyo", "radius": "50.0", "limit": "20"}


def test_search_state_coordinate_query():
    state = SearchState.from_query({"lat": "35.5", "lng": "139.7"})
    assert state.to_query() == {
        "lat": "35.5",
        "lng": "139.7",
        "radius": "10.0",
        "limit": "20",
    }


def test_search_state_non_finite_numbers_fall_back():
    state = SearchState.from_query({"lat": "nan", "lng": "inf", "radius": "-inf"})
    assert state.lat == 37.7749
    assert state.lng == -122.4194
    assert state.radius == 10


def test_search_state_out_of_range_numbers_fall_back():
    state = SearchState.from_query({"lat": "91", "lng": "-181", "radius": "-5"})
    assert state.lat == 37.7749
    assert state.lng == -122.4194
    assert state.radius == 10
    assert SearchState.from_query({"radius": "1001"}).radius == 10
    assert SearchState.from_query({"lat": "-90", "lng": "180"}).lng == 180


def test_computed_fields_are_serialised(usgs_feature, reverse_payload):
    quake = Earthquake.model_validate(usgs_feature(depth=2.1)).with_location_details(
        LocationDetails(**reverse_payload)
    )
    data = quake.model_dump(by_alias=True)
    assert data["depth_km"] == 2.1
    assert data["properties"]["locationDetails"]["has_content"] is True
    assert LocationDetails().model_dump() == {"has_content": False}


def test_absent_address_keys_are_left_out(reverse_payload):
    data = LocationDetails(**reverse_payload).model_dump()
    assert "road" not in data["address"]
    assert "postcode" not in data["address"]
    assert data["address"]["county"] == "Sonoma County"
