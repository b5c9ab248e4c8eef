import pytest


class FakeAPIError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.op = None

    def select(self, cols):
        self.op = ("select", cols)
        return self

    def insert(self, rows):
        self.op = ("insert", rows)
        return self

    def execute(self):
        self.client.calls.append((self.table,) + self.op)
        err = self.client.fail.get(self.op[0])
        if err:
            raise FakeAPIError(err)
        if self.op[0] == "select":
            return FakeResponse(list(self.client.rows))
        inserted = [dict(r, id=f"id-{len(self.client.rows) + n}") for n, r in enumerate(self.op[1])]
        self.client.rows.extend(inserted)
        return FakeResponse(inserted)


class FakeBucket:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def upload(self, path, data, file_options=None):
        self.client.calls.append((self.name, "upload", path))
        err = self.client.fail.get(f"upload:{self.name}")
        if err:
            raise FakeAPIError(err)
        self.client.objects[(self.name, path)] = data

    def get_public_url(self, path):
        self.client.calls.append((self.name, "get_public_url", path))
        return f"https://example.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        self.client.calls.append((self.name, "remove", tuple(paths)))
        for p in paths:
            self.client.objects.pop((self.name, p), None)


class FakeStorage:
    def __init__(self, client):
        self.client = client

    def from_(self, bucket):
        return FakeBucket(self.client, bucket)


class FakeClient:
    """Records every call made through the Supabase builder API."""

    def __init__(self, rows=None, fail=None):
        self.rows = list(rows or [])
        self.fail = dict(fail or {})
        self.calls = []
        self.objects = {}
        self.storage = FakeStorage(self)

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def items():
    return [
        {"id": "1", "inventory_code": "AB-1", "available": 3, "pricing": 10.00,
         "photo_url": "https://cdn.test/photos/1-a.jpg", "video_path": "https://cdn.test/videos/1-a.mp4"},
        {"id": "2", "inventory_code": "AB-2", "available": 2, "pricing": 5.50,
         "photo_url": None, "video_path": None},
        {"id": "3", "inventory_code": "zz-9", "available": 0, "pricing": 1.25,
         "photo_url": None, "video_path": "https://cdn.test/videos/9.mp4"},
    ]


@pytest.fixture
def fake_client(items):
    return FakeClient(rows=items)


@pytest.fixture
def cfg():
    return {
        "table_name": "inventory",
        "photo_bucket": "inventory-photo",
        "video_bucket": "inventory-videos",
        "cleanup_orphans": False,
    }
