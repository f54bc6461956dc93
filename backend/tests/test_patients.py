PATIENTS = [
    {
        "patId": "P001",
        "patName": "Lee Minsu",
        "age": 71,
        "deptCode": "ER",
        "prsnIdPre": "530101",
        "clncCnfrmFlag": 2,
        "juminNum": "5301011234567",
        "encryptedResidentNumber": "enc-1",
    },
    {
        "patId": "P002",
        "patName": "Park Jiwoo",
        "age": 34,
        "deptCode": "ER",
        "prsnIdPre": "900512",
        "clncCnfrmFlag": 2,
        "juminNum": "9005122345678",
        "encryptedResidentNumber": "enc-2",
    },
]


def test_search_renders_patient_table(doctor_session, fake_backend):
    fake_backend.on("GET", "/patients", json_body=PATIENTS)

    response = doctor_session.get("/patients/search", params={"clncCnfrmFlag": 2})

    assert response.status_code == 200
    assert 'id="patientTable"' in response.text
    assert "Lee Minsu" in response.text
    assert "Park Jiwoo" in response.text
    assert response.text.count(">Reviewed</td>") == 2
    assert 'data-pat-id="P001"' in response.text
    assert '<option value="2" selected>' in response.text

    request = fake_backend.calls("GET", "/patients")[-1]
    assert request.url.params["clncCnfrmFlag"] == "2"
    assert request.headers["authorization"] == "Bearer t1"


def test_new_search_replaces_previous_list(doctor_session, fake_backend):
    fake_backend.on("GET", "/patients", json_body=PATIENTS)
    doctor_session.get("/patients/search", params={"clncCnfrmFlag": 2})

    fake_backend.on("GET", "/patients", json_body=[])
    response = doctor_session.get("/patients/search", params={"clncCnfrmFlag": 1})

    assert "Lee Minsu" not in response.text
    assert "No patients match this review status." in response.text


def test_search_failure_shows_message(doctor_session, fake_backend):
    fake_backend.on("GET", "/patients", status_code=500, text="database offline")

    response = doctor_session.get("/patients/search", params={"clncCnfrmFlag": 0})

    assert response.status_code == 200
    assert "database offline" in response.text
    assert 'id="patientTable"' not in response.text


def test_invalid_flag_rejected(doctor_session, fake_backend):
    before = len(fake_backend.requests)
    response = doctor_session.get("/patients/search", params={"clncCnfrmFlag": 5})
    assert response.status_code == 422
    assert len(fake_backend.requests) == before


def test_department_failure_blocks_the_view(doctor_session, fake_backend):
    fake_backend.on("GET", "/auth/departments", status_code=401, json_body={"error": "Token expired"})

    response = doctor_session.get("/")

    assert 'id="loadError"' in response.text
    assert "Token expired" in response.text
    assert 'id="patientFilter"' not in response.text


def test_search_requires_session(client, fake_backend):
    response = client.get("/patients/search", params={"clncCnfrmFlag": 0})
    assert response.url.path == "/"
    assert 'id="loginForm"' in response.text
    assert fake_backend.calls("GET", "/patients") == []


def test_rows_with_null_fields_still_render(doctor_session, fake_backend):
    row = dict(PATIENTS[0], patName=None, prsnIdPre=None, encryptedResidentNumber=None)
    fake_backend.on("GET", "/patients", json_body=[row, PATIENTS[1]])

    response = doctor_session.get("/patients/search", params={"clncCnfrmFlag": 2})

    assert 'id="patientTable"' in response.text
    assert 'data-pat-id="P001"' in response.text
    assert "Park Jiwoo" in response.text
    assert ">None</td>" not in response.text
    assert "Unexpected response format" not in response.text
