"""
Read-only traversals over the paired relationship rows.

Every hop goes through relationship_sync.list_for_person, so only forward
edges are followed: a CHILD edge leads to a parent, a PARENT edge leads to
a child, SPOUSE and SIBLING lead sideways.
"""

from collections import deque
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from lineage.core.errors import PersonNotFoundError
from lineage.core.relationship_sync import list_for_person
from lineage.models.person import Person
from lineage.models.relationship import RelationshipType


# Edge type on the current person's row -> the step it represents
_STEP_FOR_EDGE = {
    RelationshipType.CHILD.value: "parent",
    RelationshipType.PARENT.value: "child",
    RelationshipType.SPOUSE.value: "spouse",
    RelationshipType.SIBLING.value: "sibling",
}


def require_person(db: Session, person_id: str) -> Person:
    person = db.query(Person).filter(Person.id == person_id).first()
    if not person:
        raise PersonNotFoundError(person_id)
    return person


# ============================================================
# GENERATIONS
# ============================================================

def _walk_generations(
    db: Session,
    person_id: str,
    edge_type: RelationshipType,
    max_generations: Optional[int],
) -> List[Dict[str, Any]]:
    results = []
    visited = {person_id}
    frontier = [person_id]
    generation = 0

    while frontier and (max_generations is None or generation < max_generations):
        generation += 1
        next_frontier = []
        for current_id in frontier:
            for edge in list_for_person(db, current_id, edge_type):
                relative = edge.related_person
                if relative.id in visited:
                    continue
                visited.add(relative.id)
                results.append({"person": relative, "generation": generation})
                next_frontier.append(relative.id)
        frontier = next_frontier

    return results


def find_ancestors(db: Session, person_id: str, max_generations: Optional[int] = None):
    """
    Parents, grandparents and so on, closest generation first.
    generation 1 is a parent. A person reachable along two lines is
    reported once, at the nearer generation.
    """
    require_person(db, person_id)
    return _walk_generations(db, person_id, RelationshipType.CHILD, max_generations)


def find_descendants(db: Session, person_id: str, max_generations: Optional[int] = None):
    """Children, grandchildren and so on; generation 1 is a child."""
    require_person(db, person_id)
    return _walk_generations(db, person_id, RelationshipType.PARENT, max_generations)


def find_common_ancestor(db: Session, person_id: str, other_person_id: str) -> Optional[Dict[str, Any]]:
    """
    The nearest shared ancestor of two persons, or None.

    Each person counts as their own generation-0 ancestor, so when one is
    a direct ancestor of the other that person is returned. Nearest means
    the smallest combined generation count.
    """
    require_person(db, person_id)
    require_person(db, other_person_id)

    people = {}
    generations = []
    for root_id in (person_id, other_person_id):
        found = {root_id: 0}
        for entry in _walk_generations(db, root_id, RelationshipType.CHILD, None):
            found[entry["person"].id] = entry["generation"]
            people[entry["person"].id] = entry["person"]
        generations.append(found)
    mine, theirs = generations

    shared = set(mine) & set(theirs)
    if not shared:
        return None

    best_id = min(shared, key=lambda pid: (mine[pid] + theirs[pid], mine[pid], pid))
    return {
        "person": people.get(best_id) or require_person(db, best_id),
        "generations_from_person": mine[best_id],
        "generations_from_other": theirs[best_id],
    }


# ============================================================
# PATH + KINSHIP NAME
# ============================================================

def find_relationship_path(db: Session, person_id: str, other_person_id: str) -> Optional[Dict[str, Any]]:
    """
    Shortest chain of relationships from person_id to other_person_id
    (breadth-first), with a kinship name for the chain. None when the
    two persons are not connected.
    """
    start = require_person(db, person_id)
    target = require_person(db, other_person_id)

    if person_id == other_person_id:
        return {"path": [start], "steps": [], "relationship": "self", "distance": 0}

    # person id -> (previous person id, step, Person)
    came_from = {person_id: (None, None, start)}
    queue = deque([person_id])

    while queue:
        current_id = queue.popleft()
        for edge in list_for_person(db, current_id):
            neighbour = edge.related_person
            if neighbour.id in came_from:
                continue
            came_from[neighbour.id] = (current_id, _STEP_FOR_EDGE[edge.type], neighbour)
            if neighbour.id == other_person_id:
                queue.clear()
                break
            queue.append(neighbour.id)

    if other_person_id not in came_from:
        return None

    path, steps = [], []
    node_id = other_person_id
    while node_id is not None:
        previous_id, step, person = came_from[node_id]
        path.append(person)
        if step:
            steps.append(step)
        node_id = previous_id
    path.reverse()
    steps.reverse()

    return {
        "path": path,
        "steps": steps,
        "relationship": kinship_name(steps, target.gender),
        "distance": len(steps),
    }


def _gendered(gender: Optional[str], male: str, female: str, neutral: str) -> str:
    if gender == "MALE":
        return male
    if gender == "FEMALE":
        return female
    return neutral


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _removed(n: int) -> str:
    if n == 0:
        return ""
    if n == 1:
        return " once removed"
    if n == 2:
        return " twice removed"
    return f" {n} times removed"


def _in_law_name(steps: List[str], gender: Optional[str]) -> Optional[str]:
    if steps == ["spouse"]:
        return _gendered(gender, "husband", "wife", "spouse")
    if steps == ["spouse", "parent"]:
        return _gendered(gender, "father-in-law", "mother-in-law", "parent-in-law")
    if steps == ["child", "spouse"]:
        return _gendered(gender, "son-in-law", "daughter-in-law", "child-in-law")
    if steps in (["spouse", "sibling"], ["sibling", "spouse"]):
        return _gendered(gender, "brother-in-law", "sister-in-law", "sibling-in-law")
    return None


def kinship_name(steps: List[str], gender: Optional[str] = None) -> str:
    """
    Name the relationship described by a chain of steps, from the point of
    view of the first person: ["parent", "parent"] -> "grandmother" for a woman.

    gender is the target person's; unknown gender gives neutral terms.
    """
    if not steps:
        return "self"

    if "spouse" in steps:
        return _in_law_name(steps, gender) or "relative by marriage"

    # A sibling hop is one generation up and one back down
    moves = []
    for step in steps:
        if step == "sibling":
            moves.extend(["parent", "child"])
        else:
            moves.append(step)

    up = 0
    while up < len(moves) and moves[up] == "parent":
        up += 1
    down = len(moves) - up
    if any(move != "child" for move in moves[up:]):
        return "relative"

    if down == 0:
        prefix = "great-" * (up - 2)
        if up == 1:
            return _gendered(gender, "father", "mother", "parent")
        return prefix + _gendered(gender, "grandfather", "grandmother", "grandparent")

    if up == 0:
        prefix = "great-" * (down - 2)
        if down == 1:
            return _gendered(gender, "son", "daughter", "child")
        return prefix + _gendered(gender, "grandson", "granddaughter", "grandchild")

    if up == 1 and down == 1:
        return _gendered(gender, "brother", "sister", "sibling")

    if down == 1:
        return "great-" * (up - 2) + _gendered(gender, "uncle", "aunt", "aunt/uncle")

    if up == 1:
        return "great-" * (down - 2) + _gendered(gender, "nephew", "niece", "niece/nephew")

    degree = min(up, down) - 1
    return f"{_ordinal(degree)} cousin{_removed(abs(up - down))}"
