"""
Basic usage example for objectquery.
"""

from datetime import datetime

from objectquery import Collection, ObjectQuery


def main():
    print("=" * 60)
    print("objectquery Basic Usage Example")
    print("=" * 60)
    
    # 1. Create collection
    print("\n1. Creating collection...")
    people = Collection(name="Person")
    people.extend([
        {"id": 1, "name": "clinton", "age": 18, "createdAt": datetime(2004, 12, 6)},
        {"id": 2, "name": "necati", "age": 34, "createdAt": datetime(2011, 9, 26)},
        {"id": 3, "name": "norman", "age": 28, "createdAt": datetime(2015, 6, 14)},
        {"id": 4, "name": "elias", "age": 42, "createdAt": datetime(2006, 6, 13)},
        {"id": 5, "name": "martin", "age": 18, "createdAt": datetime(2003, 1, 14)},
    ])
    print(f"   Created: {people}")
    
    # 2. Build a query
    print("\n2. Building a query...")
    query = (
        ObjectQuery.where(people)
        .contains("name", "N", True)
        .begin_group()
        .greater_than("age", 25)
        .or_()
        .in_("id", [1, 5])
        .end_group()
    )
    print(f"   Expression: {query}")
    print(f"   Values:     {query.get_values()}")
    
    # 3. Results
    print("\n3. Results...")
    print(f"   Count: {query.count()}")
    for person in query.sort("age", "DESC").find_all():
        print(f"   - {person['name']} ({person['age']})")
    
    # 4. Aggregates
    print("\n4. Aggregates over everyone...")
    everyone = ObjectQuery.where(people)
    print(f"   Average age: {everyone.average('age')}")
    print(f"   Oldest:      {everyone.max('age')['name']}")
    print(f"   Youngest:    {everyone.min('age')['name']}")
    print(f"   Ages:        {[p['age'] for p in everyone.distinct('age')]}")
    
    # 5. Negation and joins
    print("\n5. Negation and joins...")
    # not_() negates the joined criteria too
    query = ObjectQuery.where(people).not_().less_than("age", 20)
    query.join(ObjectQuery.create().greater_than("createdAt", datetime(2010, 1, 1)))
    print(f"   Expression: {query}")
    print(f"   Matches:    {[p['name'] for p in query.find_all()]}")


if __name__ == "__main__":
    main()
