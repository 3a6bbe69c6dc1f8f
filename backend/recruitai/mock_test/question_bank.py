import random
from typing import Dict, List, MutableSequence, Sequence, TypeVar

from .models import Question

T = TypeVar("T")

CATEGORIES = ("quant", "logical", "verbal", "programming")
BANK_SIZE = 30
OPTION_LABELS = ("Option A", "Option B", "Option C", "Option D")


def build_category_bank(category: str, count: int = BANK_SIZE) -> List[Question]:
    return [
        Question(
            id=f"{category}-{i}",
            category=category,
            text=f"{category.upper()} Question {i}",
            options=OPTION_LABELS,
            correct_index=i % 4,
        )
        for i in range(1, count + 1)
    ]


def build_default_bank() -> Dict[str, List[Question]]:
    return {category: build_category_bank(category) for category in CATEGORIES}


def fisher_yates_shuffle(items: Sequence[T], rng: random.Random | None = None) -> List[T]:
    rand = rng or random
    shuffled: MutableSequence[T] = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rand.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return list(shuffled)


def pick_random_questions(bank: Sequence[Question], count: int, rng: random.Random | None = None) -> List[Question]:
    return fisher_yates_shuffle(bank, rng)[: max(0, int(count))]
