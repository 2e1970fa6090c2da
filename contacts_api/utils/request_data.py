"""Request body helpers."""

from flask import request


def get_request_data():
    """
    Return the request body as a dict.

    Accepts JSON as well as form-encoded bodies; anything else (including
    malformed JSON) yields an empty dict so field validation reports what
    is missing.
    """
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    if request.form:
        return request.form.to_dict()
    return {}
