import json
from datetime import date

import pydantic
import pytest

from candidate_form.profile_store import ProfileStore


PROFILE = {
    "firstName": "Juan",
    "lastName": "Pérez",
    "email": "juan@example.com",
    "phone": "612345678",
    "educations": [
        {"institution": "Universidad Test", "title": "Ingeniería", "startDate": "2020-01-01", "endDate": "2024-01-01"}
    ],
    "workExperiences": [],
    "cv": {"filePath": "/ignored.pdf", "fileType": "application/pdf"},
}


def test_load_json_profile(tmp_path):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps(PROFILE), encoding="utf-8")

    profile = ProfileStore(path).load()

    assert profile.first_name == "Juan"
    assert profile.educations[0].start_date == date(2020, 1, 1)
    assert profile.work_experiences == []


def test_load_yaml_profile(tmp_path):
    path = tmp_path / "profile.yaml"
    path.write_text(
        "firstName: Ana\n"
        "lastName: García\n"
        "email: ana@example.com\n"
        "workExperiences:\n"
        "  - company: ACME\n"
        "    position: QA\n"
        "    startDate: 2018-03-01\n",
        encoding="utf-8",
    )

    profile = ProfileStore(path).load()

    assert profile.last_name == "García"
    assert profile.work_experiences[0].start_date == date(2018, 3, 1)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ProfileStore(tmp_path / "missing.json")


def test_unsupported_extension_raises(tmp_path):
    path = tmp_path / "profile.txt"
    path.write_text("firstName: Juan")

    with pytest.raises(ValueError, match="Unsupported file format"):
        ProfileStore(path).load()


def test_invalid_date_fails_validation(tmp_path):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps({"educations": [{"startDate": "15/01/2020"}]}), encoding="utf-8")

    with pytest.raises(pydantic.ValidationError):
        ProfileStore(path).load()
