"""
Integration Tests: HTML Pages
"""

import pytest
from httpx import AsyncClient

import crud


@pytest.mark.integration
@pytest.mark.asyncio
async def test_upload_page(client: AsyncClient):
    response = await client.get("/pages/upload")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    body = response.text
    assert 'id="upload-form"' in body
    assert 'accept="image/*"' in body
    assert "/api/images" in body
    assert 'href="/pages/gallery"' in body


@pytest.mark.integration
@pytest.mark.asyncio
async def test_gallery_empty_state(client: AsyncClient):
    response = await client.get("/pages/gallery")

    assert response.status_code == 200
    assert "No images uploaded yet" in response.text
    assert 'href="/pages/upload"' in response.text


@pytest.mark.integration
@pytest.mark.asyncio
async def test_gallery_lists_uploads(client: AsyncClient, jpeg_bytes):
    image = (await client.post(
        "/api/images",
        data={"title": "<b>Sunset</b>"},
        files={"image": ("beach.jpg", jpeg_bytes, "image/jpeg")},
    )).json()["image"]

    response = await client.get("/pages/gallery")

    assert response.status_code == 200
    body = response.text
    assert "No images uploaded yet" not in body
    assert "&lt;b&gt;Sunset&lt;/b&gt;" in body
    assert "<b>Sunset</b>" not in body
    assert f'src="{image["imagePath"]}"' in body
    assert image["createdAt"][:10] in body


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize("alias, target", [("/upload", "/pages/upload"), ("/gallery", "/pages/gallery")])
async def test_page_aliases_redirect(client: AsyncClient, alias, target):
    response = await client.get(alias)

    assert response.status_code in (302, 307)
    assert response.headers["location"] == target


@pytest.mark.integration
@pytest.mark.asyncio
async def test_gallery_store_failure_renders_html(client: AsyncClient, monkeypatch):
    def broken_list(*args, **kwargs):
        raise RuntimeError("connection refused")

    monkeypatch.setattr(crud, "list_images", broken_list)

    response = await client.get("/pages/gallery")

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/html")
    assert "Failed to fetch images" in response.text
    assert "connection refused" not in response.text


@pytest.mark.integration
@pytest.mark.asyncio
async def test_upload_script_refreshes_outside_upload_error_path(client: AsyncClient):
    body = (await client.get("/pages/upload")).text

    # a failed list refresh must not be reported as a failed upload
    assert "Could not load recent uploads" in body
    assert body.index("await refreshRecent()") > body.index("'Failed to upload image: '")
    assert body.index("setTimeout(") > body.index("'Failed to upload image: '")
