"""Test suite for the mug demo model"""

import pytest

from ardemo.deeplink import MugURLParameters
from ardemo.exceptions import ImageMeshesMissingError, ModelMissingError, PrimaryMeshMissingError
from ardemo.models import Asset, DownloadResult
from ardemo.services.mug import MugModel, build_materials, hex_to_rgb, model_rendition


def mug_asset(**model_fields) -> dict:
    fields = {
        "primarymeshname": "mug_body",
        "imagemeshnames": ["decal_front", "decal_back"],
        "textmeshnames": ["text_front"],
        "usdz": {"id": "CONT_USDZ", "name": "mug.usdz"},
    }
    fields.update(model_fields)
    return {
        "id": "CORE456",
        "name": "Coffee Mug",
        "type": "Mug",
        "fields": {
            "price": 12.5,
            "model": {"id": "CORE_MODEL", "name": "model", "fields": fields},
        },
    }


@pytest.fixture
def parameters() -> MugURLParameters:
    return MugURLParameters(
        ocm_url="https://someserver.com",
        token="123",
        asset_id="CORE456",
        image_id="CONT789",
        mug_color=0x84AFD9,
        text_color=0x050505,
    )


def test_fetch_downloads_decal_and_model(server, content_client, asset_cache, parameters):
    """Fetching resolves the model rendition and caches both files"""
    server.assets["CORE456"] = mug_asset()
    server.add_file("CONT789", "decal.png", b"decal", '"d1"')
    server.add_file("CONT_USDZ", "mug.usdz", b"usdz", '"u1"')

    materials = MugModel(parameters, asset_cache, client=content_client).fetch()

    assert materials.main_mesh == "mug_body"
    assert materials.image_meshes == ["decal_front", "decal_back"]
    assert materials.text_meshes == ["text_front"]
    assert materials.price == 12.5
    assert materials.decal_path.read_bytes() == b"decal"
    assert materials.model_path.read_bytes() == b"usdz"
    assert "CONT789" in asset_cache
    assert "CONT_USDZ" in asset_cache


def test_second_fetch_is_served_from_cache(server, content_client, asset_cache, parameters):
    server.assets["CORE456"] = mug_asset()
    server.add_file("CONT789", "decal.png", b"decal", '"d1"')
    server.add_file("CONT_USDZ", "mug.usdz", b"usdz", '"u1"')
    model = MugModel(parameters, asset_cache, client=content_client)
    model.fetch()

    materials = model.fetch()

    assert materials.model_path.read_bytes() == b"usdz"
    assert asset_cache.stats == {"hits": 2, "misses": 0, "stored": 2}


def test_missing_model_field(server, content_client, asset_cache, parameters):
    asset = mug_asset()
    del asset["fields"]["model"]
    server.assets["CORE456"] = asset
    server.add_file("CONT789", "decal.png", b"decal", '"d1"')

    with pytest.raises(ModelMissingError):
        MugModel(parameters, asset_cache, client=content_client).fetch()


def test_model_rendition_requires_usdz():
    asset = Asset.model_validate(mug_asset(usdz=None))

    with pytest.raises(ModelMissingError):
        model_rendition(asset)


def downloads(tmp_path):
    return (
        DownloadResult(path=tmp_path / "mug.usdz", status="downloaded"),
        DownloadResult(path=tmp_path / "decal.png", status="cached"),
    )


def test_primary_mesh_missing(tmp_path):
    asset = Asset.model_validate(mug_asset(primarymeshname=None))

    with pytest.raises(PrimaryMeshMissingError):
        build_materials(asset, *downloads(tmp_path))


@pytest.mark.parametrize("image_meshes", [None, []])
def test_image_meshes_missing_or_empty(tmp_path, image_meshes):
    asset = Asset.model_validate(mug_asset(imagemeshnames=image_meshes))

    with pytest.raises(ImageMeshesMissingError):
        build_materials(asset, *downloads(tmp_path))


def test_text_meshes_and_price_optional(tmp_path):
    data = mug_asset(textmeshnames=None)
    del data["fields"]["price"]

    materials = build_materials(Asset.model_validate(data), *downloads(tmp_path))

    assert materials.text_meshes == []
    assert materials.price is None


def test_colors(parameters, asset_cache):
    model = MugModel(parameters, asset_cache, client=object())

    assert hex_to_rgb(0xFF0000) == (1.0, 0.0, 0.0)
    assert model.mug_color_rgb == pytest.approx((0x84 / 255, 0xAF / 255, 0xD9 / 255))
    assert model.text_color_rgb == pytest.approx((5 / 255, 5 / 255, 5 / 255))
