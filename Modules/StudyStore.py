import os
import json
import uuid
import threading

from Modules.Logger import Logger

# Determine the root directory of the study tracker project
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
DATA_DIR = os.path.join(ROOT_DIR, "User", "Data")

COLLECTION_FILES = {
    "chapters": "chapters.json",
    "deadlines": "deadlines.json",
}

# Guards every read-modify-write of either collection file
_LOCK = threading.RLock()


def get_data_dir():
    return DATA_DIR


def set_data_dir(path):
    global DATA_DIR
    DATA_DIR = os.path.abspath(path)


def ensure_dir(path):
    """
    Ensures that a directory exists. If not, it creates the directory.
    """
    if not os.path.exists(path):
        os.makedirs(path)


def get_collection_path(collection):
    """
    Absolute path of a collection's JSON file. Raises KeyError for names
    other than 'chapters' and 'deadlines'.
    """
    return os.path.join(DATA_DIR, COLLECTION_FILES[collection])


def _write_json(path, data):
    ensure_dir(os.path.dirname(path))
    tmp = f"{path}.{uuid.uuid4().hex}.tmp"
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)


def ensure_files():
    """
    Creates every collection file that is missing, containing an empty array.
    """
    with _LOCK:
        for collection in COLLECTION_FILES:
            path = get_collection_path(collection)
            if not os.path.exists(path):
                _write_json(path, [])
                Logger.info(f"Created empty {collection} file at {path}")


def load(collection):
    """
    Reads a collection. A missing file is created as []; an empty,
    unparseable or non-array file reads as [] and is left untouched.
    """
    path = get_collection_path(collection)
    with _LOCK:
        if not os.path.exists(path):
            _write_json(path, [])
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            Logger.warn(f"Could not read {collection} file {path}: {e}")
            return []
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except ValueError as e:
        Logger.warn(f"Corrupt {collection} file {path}, treating as empty: {e}")
        return []
    if not isinstance(data, list):
        Logger.warn(f"{collection} file {path} does not hold an array, treating as empty")
        return []
    return data


def save(collection, records):
    """
    Overwrites the whole collection file with the pretty-printed array.
    """
    path = get_collection_path(collection)
    with _LOCK:
        _write_json(path, list(records))


def update(collection, fn):
    """
    Load, transform and save a collection as one step under the store lock.
    fn receives the loaded records and returns (new_records, result);
    update returns result.
    """
    with _LOCK:
        records = load(collection)
        new_records, result = fn(records)
        save(collection, new_records)
    return result
