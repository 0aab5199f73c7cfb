import logging

from flask import Blueprint, Response, jsonify, render_template, request

from iconkit.exceptions import SvgNotFound
from iconkit.utils.http_utils import APIError
from iconkit.utils.icon_utils import get_factory, get_stack

logger = logging.getLogger(__name__)

icons_bp = Blueprint("icons", __name__)

# Query parameters passed through to the rendered <svg> tag
ALLOWED_QUERY_ATTRIBUTES = ("class", "title", "width", "height", "fill", "stroke")


@icons_bp.route("/")
def gallery():
    factory = get_factory()
    sets = []
    for name, icon_set in factory.all().items():
        sets.append({"name": name, "prefix": icon_set.prefix, "icons": factory.icon_names(name)})
    return render_template("gallery.html", sets=sets)


@icons_bp.route("/icons/<path:name>.svg")
def icon_svg(name):
    attributes = {
        key: request.args[key] for key in ALLOWED_QUERY_ATTRIBUTES if request.args.get(key)
    }
    try:
        icon = get_factory().svg(name, attributes, stack=get_stack())
    except SvgNotFound as ex:
        logger.info("Icon lookup failed: %s", ex)
        raise APIError(str(ex), status=404, code="icon_not_found", details={"name": name})

    response = Response(icon.render(), mimetype="image/svg+xml")
    response.headers.setdefault("Cache-Control", "public, max-age=3600")
    return response


@icons_bp.route("/api/icons")
def list_icons():
    factory = get_factory()
    payload = {}
    for name, icon_set in factory.all().items():
        data = icon_set.to_dict()
        # Filesystem locations stay server-side
        data.pop("paths")
        data["icons"] = factory.icon_names(name)
        payload[name] = data
    logger.debug("Listed %d icon sets", len(payload))
    return jsonify({"sets": payload})
