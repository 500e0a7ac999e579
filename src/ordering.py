"""Sibling ordering inside one couple group."""

from typing import Generic

from models import E, Gender, Node, PersonSchema


class ChildOrderingPolicy(Generic[E]):
    """
    Orders the children of a couple group so that full siblings stay
    together and half-sibling groups follow the order of the mothers.

    1. The husband's children come before anyone else's.
    2. Among his children, those without a listed mother come first, then
       by the earliest position of their mother in the group; a mother
       outside the group sorts after every mother inside it.
    3. Remaining ties fall back to the "fathers:mothers" string of each
       child and finally to the child's id, so the order is total.
    """

    def __init__(self, schema: PersonSchema[E]):
        self.schema = schema

    def sort_key(self, child: Node[E], group: list[Node[E]]) -> tuple:
        schema = self.schema
        fathers = schema.father_ids(child.data) or []
        mothers = schema.mother_ids(child.data) or []
        parent_key = f"{','.join(fathers)}:{','.join(mothers)}"

        husband = next((n for n in group if schema.gender(n.data) == Gender.MALE), None)
        if husband is None:
            return (0, 0, parent_key, child.id)
        if husband.id not in fathers:
            return (1, 0, parent_key, child.id)

        if not mothers:
            return (0, -1, parent_key, child.id)
        wives = [n.id for n in group if schema.gender(n.data) != Gender.MALE]
        mother_rank = min((wives.index(m) for m in mothers if m in wives), default=len(wives))
        return (0, mother_rank, parent_key, child.id)

    def compare(self, a: Node[E], b: Node[E], group: list[Node[E]]) -> int:
        key_a = self.sort_key(a, group)
        key_b = self.sort_key(b, group)
        return (key_a > key_b) - (key_a < key_b)

    def order(self, children: list[Node[E]], group: list[Node[E]]) -> list[Node[E]]:
        return sorted(children, key=lambda child: self.sort_key(child, group))
