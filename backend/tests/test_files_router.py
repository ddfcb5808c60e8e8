FILE_FIELDS = [
    {"id": "cv", "type": "file", "label": "CV",
     "properties": {"max_file_size": 0.001, "accepted_file_types": ".pdf,image/*"}},
    {"id": "name", "type": "text", "label": "Name"},
]


def _upload(client, form_id, field_id, filename, content, content_type):
    return client.post(
        "/api/files/upload",
        data={"form_id": form_id, "field_id": field_id},
        files={"file": (filename, content, content_type)},
    )


def test_upload_and_download(anon_client, make_form):
    form = make_form(fields=FILE_FIELDS)
    response = _upload(anon_client, form.id, "cv", "cv.pdf", b"%PDF-1.4 tiny", "application/pdf")
    assert response.status_code == 201
    descriptor = response.json()
    assert descriptor["name"] == "cv.pdf"
    assert descriptor["size"] == len(b"%PDF-1.4 tiny")
    assert descriptor["mime_type"] == "application/pdf"

    download = anon_client.get(descriptor["url"])
    assert download.status_code == 200
    assert download.content == b"%PDF-1.4 tiny"


def test_uploaded_descriptor_is_accepted_by_submit(anon_client, db, make_form):
    form = make_form(fields=FILE_FIELDS)
    descriptor = _upload(anon_client, form.id, "cv", "photo.png", b"png", "image/png").json()
    response = anon_client.post(f"/api/public/forms/{form.id}/submit", json={"cv": descriptor})
    assert response.status_code == 201


def test_upload_wrong_type(anon_client, make_form):
    form = make_form(fields=FILE_FIELDS)
    response = _upload(anon_client, form.id, "cv", "notes.docx", b"doc", "application/msword")
    assert response.status_code == 415
    assert response.json()["detail"]["code"] == "FILE_TYPE_NOT_ALLOWED"


def test_upload_too_large(anon_client, make_form):
    form = make_form(fields=FILE_FIELDS)
    response = _upload(anon_client, form.id, "cv", "big.pdf", b"x" * 2048, "application/pdf")
    assert response.status_code == 413


def test_upload_to_non_file_field(anon_client, make_form):
    form = make_form(fields=FILE_FIELDS)
    response = _upload(anon_client, form.id, "name", "cv.pdf", b"pdf", "application/pdf")
    assert response.status_code == 422


def test_download_rejects_bad_names(anon_client):
    assert anon_client.get("/api/files/..%5Csecret").status_code == 400
    assert anon_client.get("/api/files/missing.pdf").status_code == 404
