from marshmallow import Schema, fields


class FileOutSchema(Schema):
    id = fields.Integer()
    name = fields.String()
    extension = fields.String()
    mimetype = fields.String(allow_none=True)
    size = fields.Integer()
    uploaded = fields.DateTime(format="%Y-%m-%d %H:%M:%S")
    path = fields.String()


class DeleteResultSchema(Schema):
    deletedRows = fields.Integer(attribute="deleted_count")
