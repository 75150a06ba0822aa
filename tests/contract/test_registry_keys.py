from chartsmith.schemas.chart import ChartType
from chartsmith.viz.registry import factory


def test_supported_keys_listed():
    keys = factory.list_keys()
    assert keys == sorted(kind.value for kind in ChartType)
    assert "bar-stacked" in keys


def test_every_key_resolves_to_a_renderer():
    for kind in ChartType:
        renderer = factory.get(kind)
        assert renderer is not None
        assert callable(renderer.render)
