# pyright: reportMissingImports=false
import re


def test_icon_svg_route(client):
    resp = client.get("/icons/close.svg?class=w-4")
    assert resp.status_code == 200
    assert resp.mimetype == "image/svg+xml"
    body = resp.data.decode()
    assert body == '<svg class="icon w-4" aria-hidden="true" viewBox="0 0 10 10"><path d="M0 0"/></svg>'


def test_icon_svg_route_with_title(client):
    body = client.get("/icons/brand-logo.svg?title=Logo").data.decode()
    match = re.search(r'<title id="(svg-inline--title-[A-Za-z0-9]{10})">Logo</title>', body)
    assert match
    assert f'aria-labelledby="{match.group(1)}"' in body


def test_icon_svg_route_ignores_unknown_params(client):
    body = client.get("/icons/close.svg?onload=alert(1)&width=12").data.decode()
    assert "onload" not in body
    assert 'width="12"' in body


def test_icon_svg_route_uses_fallback(client):
    resp = client.get("/icons/missing.svg")
    assert resp.status_code == 200
    assert 'd="M0 0"' in resp.data.decode()


def test_icon_svg_route_not_found(client, flask_app):
    factory = flask_app.extensions["iconkit"]
    factory.fallback = ""
    resp = client.get("/icons/missing.svg")
    assert resp.status_code == 404

    resp = client.get("/icons/missing.svg", headers={"Accept": "application/json"})
    assert resp.status_code == 404
    data = resp.get_json()
    assert data["code"] == "icon_not_found"
    assert data["details"] == {"name": "missing"}
    assert "request_id" in data


def test_api_icons_listing(client):
    resp = client.get("/api/icons")
    assert resp.status_code == 200
    data = resp.get_json()["sets"]
    assert data["default"]["icons"] == ["arrows.left", "close", "star"]
    assert data["brand"]["prefix"] == "brand"
    assert "paths" not in data["brand"]


def test_unknown_api_path_returns_json_404(client):
    resp = client.get("/api/nothing")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Not found"


def test_gallery_defers_each_icon_once(client):
    resp = client.get("/")
    assert resp.status_code == 200
    html = resp.data.decode()
    # One <use> per icon, one <g> definition per distinct body
    assert html.count("<use href=") == 4
    assert html.count('<g id="icon-') == 4
    assert '<svg hidden class="hidden">' in html
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_deferred_stack_is_per_request(client):
    first = client.get("/").data.decode()
    second = client.get("/").data.decode()
    assert first.count('<g id="icon-') == second.count('<g id="icon-') == 4


def _dotted(path) -> str:
    import os

    return "." + ".".join(part for part in str(path).split(os.sep) if part)


def test_icon_svg_route_cannot_escape_icon_sets(client, flask_app, tmp_path):
    (tmp_path / "secret.svg").write_text("<svg>SECRET</svg>")
    flask_app.extensions["iconkit"].fallback = ""

    for name in (_dotted(tmp_path / "secret"), "..secret", "icon-..secret"):
        resp = client.get(f"/icons/{name}.svg")
        assert resp.status_code == 404
        assert b"SECRET" not in resp.data


def test_icon_svg_route_escape_attempt_gets_fallback(client, tmp_path):
    (tmp_path / "secret.svg").write_text("<svg>SECRET</svg>")
    resp = client.get(f"/icons/{_dotted(tmp_path / 'secret')}.svg")
    assert resp.status_code == 200
    assert b"SECRET" not in resp.data
    assert b'd="M0 0"' in resp.data
