"""
StrToFile Backend — Sample Archive Content
============================================

What:  The fixed set of records served by GET /api/download/download-sample,
       so clients can try the download flow without composing a request.
"""

from datetime import datetime
from typing import List, Optional

from strtofile.schemas.file_record import FileRecord

_APP_JSON = """{
  "name": "StrToFile API",
  "version": "1.0.0",
  "description": "String-to-file ZIP download service"
}"""

_HELLO_PY = """from datetime import datetime


def main():
    print("Hello, World!")
    print(f"Current time: {datetime.now()}")


if __name__ == "__main__":
    main()
"""

_USERS_CSV = """id,name,email,created_at
1,Alice Zhang,alice@example.com,2024-01-01
2,Bob Li,bob@example.com,2024-01-02
3,Carol Wang,carol@example.com,2024-01-03"""


def sample_records(now: Optional[datetime] = None) -> List[FileRecord]:
    """Four demo files, including nested paths; the readme is stamped with `now`."""
    created = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    return [
        FileRecord(
            path="readme.txt",
            content=(
                "This is a sample README file.\n\n"
                "This service packs text files into a ZIP download.\n\n"
                f"Created at: {created}"
            ),
        ),
        FileRecord(path="config/app.json", content=_APP_JSON),
        FileRecord(path="scripts/hello.py", content=_HELLO_PY),
        FileRecord(path="data/users.csv", content=_USERS_CSV),
    ]
