from tests.constants import PASSWORD, PDF_BYTES, URLs


def _auth_headers(client, email="alice@example.com", name="Alice"):
    client.post(URLs.REGISTER, json={"name": name, "email": email, "password": PASSWORD})
    response = client.post(URLs.LOGIN, json={"email": email, "password": PASSWORD})
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


def _create_folder(client, headers, **payload):
    payload.setdefault("name", "Docs")
    return client.post(URLs.FOLDERS, headers=headers, json=payload)


def test_create_folder(client):
    headers = _auth_headers(client)

    response = _create_folder(client, headers, name="  Docs ", description="Paperwork")
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    folder = data["data"]
    assert folder["name"] == "Docs"
    assert folder["description"] == "Paperwork"
    assert folder["parent_id"] is None
    assert folder["counts"] == {"files": 0, "children": 0}
    assert "created_at" in folder


def test_create_folder_without_name(client):
    headers = _auth_headers(client)

    response = client.post(URLs.FOLDERS, headers=headers, json={"description": "No name"})
    assert response.status_code == 400
    assert response.json()["message"] == "Folder name is required"

    response = _create_folder(client, headers, name="   ")
    assert response.status_code == 400


def test_create_folder_name_too_long(client):
    headers = _auth_headers(client)

    response = _create_folder(client, headers, name="x" * 256)
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Bad Request"
    assert data["message"] == "Folder name must be at most 255 characters"

    assert _create_folder(client, headers, name="x" * 255).status_code == 201


def test_rename_folder_name_too_long(client):
    headers = _auth_headers(client)
    folder = _create_folder(client, headers).json()["data"]

    response = client.put(
        URLs.FOLDER.format(folder["id"]), headers=headers, json={"name": "y" * 300}
    )
    assert response.status_code == 400


def test_create_subfolder(client):
    headers = _auth_headers(client)
    parent = _create_folder(client, headers).json()["data"]

    response = _create_folder(client, headers, name="2026", parent_id=parent["id"])
    assert response.status_code == 201
    assert response.json()["data"]["parent_id"] == parent["id"]


def test_create_folder_with_missing_parent(client):
    headers = _auth_headers(client)

    response = _create_folder(client, headers, parent_id="missing")
    assert response.status_code == 404
    assert response.json()["message"] == "Parent folder not found"


def test_create_folder_under_other_users_folder(client):
    alice = _auth_headers(client)
    bob = _auth_headers(client, email="bob@example.com", name="Bob")
    parent = _create_folder(client, alice).json()["data"]

    response = _create_folder(client, bob, parent_id=parent["id"])
    assert response.status_code == 404


def test_list_folders(client):
    alice = _auth_headers(client)
    bob = _auth_headers(client, email="bob@example.com", name="Bob")
    first = _create_folder(client, alice, name="First").json()["data"]
    second = _create_folder(client, alice, name="Second", parent_id=first["id"]).json()["data"]
    _create_folder(client, bob, name="Bob's")

    response = client.get(URLs.FOLDERS, headers=alice)
    assert response.status_code == 200
    folders = response.json()["data"]
    assert [f["id"] for f in folders] == [second["id"], first["id"]]
    assert folders[1]["counts"] == {"files": 0, "children": 1}


def test_get_folder_of_other_user(client):
    alice = _auth_headers(client)
    bob = _auth_headers(client, email="bob@example.com", name="Bob")
    folder = _create_folder(client, alice).json()["data"]

    response = client.get(URLs.FOLDER.format(folder["id"]), headers=bob)
    assert response.status_code == 404
    assert response.json()["message"] == "Folder not found"


def test_update_folder(client):
    headers = _auth_headers(client)
    folder = _create_folder(client, headers, description="Old").json()["data"]

    response = client.put(URLs.FOLDER.format(folder["id"]), headers=headers, json={"name": "Papers"})
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["name"] == "Papers"
    assert updated["description"] == "Old"

    response = client.put(
        URLs.FOLDER.format(folder["id"]),
        headers=headers,
        json={"name": "Papers", "description": ""},
    )
    assert response.json()["data"]["description"] is None


def test_update_folder_without_name(client):
    headers = _auth_headers(client)
    folder = _create_folder(client, headers).json()["data"]

    response = client.put(URLs.FOLDER.format(folder["id"]), headers=headers, json={})
    assert response.status_code == 400


def test_update_folder_of_other_user(client):
    alice = _auth_headers(client)
    bob = _auth_headers(client, email="bob@example.com", name="Bob")
    folder = _create_folder(client, alice).json()["data"]

    response = client.put(URLs.FOLDER.format(folder["id"]), headers=bob, json={"name": "Mine"})
    assert response.status_code == 404


def test_delete_folder_with_subfolder(client):
    headers = _auth_headers(client)
    parent = _create_folder(client, headers).json()["data"]
    child = _create_folder(client, headers, name="Sub", parent_id=parent["id"]).json()["data"]

    response = client.delete(URLs.FOLDER.format(parent["id"]), headers=headers)
    assert response.status_code == 400

    assert client.delete(URLs.FOLDER.format(child["id"]), headers=headers).status_code == 200
    assert client.delete(URLs.FOLDER.format(parent["id"]), headers=headers).status_code == 200


def test_delete_missing_folder(client):
    headers = _auth_headers(client)

    response = client.delete(URLs.FOLDER.format("missing"), headers=headers)
    assert response.status_code == 404


def test_folder_lifecycle_with_file(client, blob_store):
    """Create a folder, fill it, fail to delete it, empty it, delete it."""
    headers = _auth_headers(client)
    folder = _create_folder(client, headers, name="Docs").json()["data"]

    upload = client.post(
        URLs.FILES_UPLOAD,
        headers=headers,
        files={"file": ("report.pdf", PDF_BYTES, "application/pdf")},
        data={"folder_id": folder["id"]},
    )
    assert upload.status_code == 201
    file_id = upload.json()["data"]["id"]

    detail = client.get(URLs.FOLDER.format(folder["id"]), headers=headers).json()["data"]
    assert detail["counts"] == {"files": 1, "children": 0}
    assert [f["id"] for f in detail["files"]] == [file_id]
    assert detail["children"] == []

    blocked = client.delete(URLs.FOLDER.format(folder["id"]), headers=headers)
    assert blocked.status_code == 400
    assert blocked.json() == {
        "success": False,
        "error": "Bad Request",
        "message": "Cannot delete folder that contains files or subfolders",
    }

    assert client.delete(URLs.FILE.format(file_id), headers=headers).status_code == 200

    response = client.delete(URLs.FOLDER.format(folder["id"]), headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Folder deleted successfully"
    assert client.get(URLs.FOLDER.format(folder["id"]), headers=headers).status_code == 404


def test_folders_require_auth(client):
    assert client.get(URLs.FOLDERS).status_code in (401, 403)
