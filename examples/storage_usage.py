"""
Persisting and reloading a collection.
"""

import tempfile
from pathlib import Path

from objectquery import Collection, ObjectQuery
from objectquery.utils.logging import setup_logger


def main():
    setup_logger("objectquery", level="INFO")
    
    people = Collection([
        {"id": i, "name": f"person_{i}", "age": 18 + (i * 7) % 50}
        for i in range(100)
    ], name="Person")
    
    with tempfile.TemporaryDirectory() as data_dir:
        path = Path(data_dir) / "Person.oqc"
        size = people.save(path, compress=True)
        print(f"Saved {len(people)} records ({size} bytes)")
        
        loaded = Collection.load(path)
        query = ObjectQuery.where(loaded).between("age", 30, 40).sort("age")
        print(f"{query} {query.get_values()} -> {query.count()} records")


if __name__ == "__main__":
    main()
