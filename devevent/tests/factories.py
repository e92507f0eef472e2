"""Shared test data builders."""

FAKE_IMAGE_URL = "https://demo.ucarecd.net/0b7f1c2e-test/-/preview/1000x562/"


def make_event_payload(**overrides) -> dict:
    payload = {
        "title": "PyCon Berlin 2025",
        "description": "Three days of talks about Python.",
        "overview": "Talks, sprints and tutorials.",
        "image": "https://demo.ucarecd.net/abc/-/preview/1000x562/",
        "venue": "bcc Berlin Congress Center",
        "location": "Berlin, Germany",
        "date": "2025-04-23",
        "time": "09:00",
        "mode": "offline",
        "audience": "Developers",
        "organizer": "Python Software Verband",
        "agenda": ["Registration", "Keynote", "Sprints"],
        "tags": ["python", "conference"],
    }
    payload.update(overrides)
    return payload


class FakeUploader:
    def __init__(self):
        self.uploads = []

    def upload(self, data: bytes, filename: str, content_type: str | None = None) -> str:
        self.uploads.append((data, filename, content_type))
        return FAKE_IMAGE_URL
