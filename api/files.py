from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, request, current_app, send_from_directory

from models.schemas.common import parse_file_id, coerce_page_param
from models.schemas.file import FileOutSchema, DeleteResultSchema
from utils.decorators import jwt_required
from utils.file_store import FileStore
from .errors import success_response

bp = Blueprint("files", __name__)

file_out_schema = FileOutSchema()
files_out_schema = FileOutSchema(many=True)
delete_result_schema = DeleteResultSchema()


def file_store() -> FileStore:
    return current_app.extensions["file_store"]


def uploaded_file():
    return request.files.get(current_app.config["UPLOAD_FIELD"])


@bp.get("/list")
@jwt_required()
def list_files():
    """
    List files, ordered by id
    ---
    tags:
      - Files
    security:
      - Bearer: []
    parameters:
      - { in: query, name: list_size, type: integer, default: 10 }
      - { in: query, name: page, type: integer, default: 1 }
    responses:
      200: { description: OK }
      403: { description: Invalid token }
    """
    page_size = coerce_page_param(
        request.args.get("list_size"), current_app.config["DEFAULT_PAGE_SIZE"]
    )
    page = coerce_page_param(request.args.get("page"), 1)
    rows = file_store().list(page_size, page)
    return success_response(files_out_schema.dump(rows))


@bp.post("/upload")
@jwt_required()
def upload_file():
    """
    Upload a file
    ---
    tags:
      - Files
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: uploadFile, type: file, required: true }
    responses:
      201: { description: Created }
      403: { description: Invalid token }
      405: { description: No file in the request }
    """
    record = file_store().create(uploaded_file())
    return success_response(file_out_schema.dump(record), 201)


@bp.get("/<id>")
@jwt_required()
def get_file(id):
    """
    File metadata
    ---
    tags:
      - Files
    security:
      - Bearer: []
    parameters:
      - { in: path, name: id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
      405: { description: id is not a number }
    """
    record = file_store().read(parse_file_id(id))
    return success_response(file_out_schema.dump(record))


@bp.get("/download/<id>")
@jwt_required()
def download_file(id):
    """
    Download file contents as an attachment
    ---
    tags:
      - Files
    security:
      - Bearer: []
    produces:
      - application/octet-stream
    parameters:
      - { in: path, name: id, type: integer, required: true }
    responses:
      200: { description: File contents }
      404: { description: Not found }
    """
    download = file_store().prepare_download(parse_file_id(id))
    response = send_from_directory(
        download.root_dir,
        download.file_name,
        as_attachment=True,
        download_name=download.display_name,
    )
    response.headers["x-timestamp"] = str(int(datetime.now(timezone.utc).timestamp() * 1000))
    response.headers["x-sent"] = "true"
    return response


@bp.put("/update/<id>")
@jwt_required()
def update_file(id):
    """
    Replace a file's contents and metadata
    ---
    tags:
      - Files
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - { in: path, name: id, type: integer, required: true }
      - { in: formData, name: uploadFile, type: file, required: true }
    responses:
      200: { description: Updated }
      404: { description: Not found }
      405: { description: Validation error }
    """
    record = file_store().replace(parse_file_id(id), uploaded_file())
    return success_response(file_out_schema.dump(record))


@bp.delete("/delete/<id>")
@jwt_required()
def delete_file(id):
    """
    Delete a file (row first, then bytes)
    ---
    tags:
      - Files
    security:
      - Bearer: []
    parameters:
      - { in: path, name: id, type: integer, required: true }
    responses:
      200: { description: "{deletedRows: n}" }
      405: { description: id is not a number }
    """
    result = file_store().delete(parse_file_id(id))
    return success_response(delete_result_schema.dump(result))
