"""
Short public routes.

``/file/<token>`` is the public reference handed out on upload and is served
directly. ``/upload`` preserves the unversioned upload path via a 307
redirect (method and body are kept).
"""
from flask import Blueprint, redirect, url_for

from filedrop.api.v1.namespaces import serve_download

legacy_bp = Blueprint('legacy', __name__)


@legacy_bp.route('/upload', methods=['POST'])
def legacy_upload():
    return redirect(url_for('api_v1.file_upload'), code=307)


@legacy_bp.route('/file/<string:token>', methods=['GET'])
def public_download(token):
    return serve_download(token)
