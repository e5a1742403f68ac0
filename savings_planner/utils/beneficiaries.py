from __future__ import annotations

from typing import Iterable, List

from savings_planner.core.errors import LastBeneficiaryError
from savings_planner.core.schemas import Beneficiary


def default_beneficiaries(ages: Iterable[int]) -> List[Beneficiary]:
    return [Beneficiary(id=i, current_age=int(age)) for i, age in enumerate(ages, start=1)]


def _index_of(beneficiaries: List[Beneficiary], beneficiary_id: int) -> int:
    for i, b in enumerate(beneficiaries):
        if b.id == beneficiary_id:
            return i
    raise KeyError(f"No beneficiary with id {beneficiary_id}")


def add_beneficiary(beneficiaries: List[Beneficiary], current_age: int) -> Beneficiary:
    next_id = max((b.id for b in beneficiaries), default=0) + 1
    b = Beneficiary(id=next_id, current_age=current_age)
    beneficiaries.append(b)
    return b


def remove_beneficiary(beneficiaries: List[Beneficiary], beneficiary_id: int) -> Beneficiary:
    idx = _index_of(beneficiaries, beneficiary_id)
    if len(beneficiaries) <= 1:
        raise LastBeneficiaryError(beneficiary_id)
    return beneficiaries.pop(idx)


def update_age(beneficiaries: List[Beneficiary], beneficiary_id: int, current_age: int) -> Beneficiary:
    idx = _index_of(beneficiaries, beneficiary_id)
    b = Beneficiary(id=beneficiary_id, current_age=current_age)
    beneficiaries[idx] = b
    return b
