# pagecms/api/v1/layout.py
from flask import Response
from pagecms.layout.float_image import editor_stylesheet
from . import v1_bp


@v1_bp.route("/layout/float-image.css", methods=["GET"])
def float_image_stylesheet():
    """Stylesheet the editing surface loads; same rules the public renderer inlines."""
    return Response(editor_stylesheet(), mimetype="text/css")
