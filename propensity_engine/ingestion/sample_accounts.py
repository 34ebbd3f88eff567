"""
Healthcare sample-account generator.

Builds a batch of realistic collectability accounts without a backend:
roughly a third each of high-, medium- and low-likelihood profiles, with
unique FACS numbers drawn from a fixed pool.  Pass ``seed`` for a
reproducible batch.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Optional

from propensity_engine.models.account import FeatureRecord
from propensity_engine.taxonomy.categories import VerticalSlug

logger = logging.getLogger(__name__)

FACS_OPTIONS: tuple[str, ...] = (
    "32552411", "25567104", "75630520", "84489465", "19283746",
    "56473829", "91827364", "43218765", "67834521", "12349876",
    "38472615", "74615283", "29384756", "65412738", "81726354",
    "47283916", "53917264", "68249135", "14726385", "92635174",
)

SERVICE_DESCR_OPTIONS: tuple[str, ...] = (
    "Diseases of the circulatory system",
    "Symptoms, signs, and abnormal clinical laboratory findings, not elsewhere classified",
    "Diseases of the musculoskeletal system and connective tissue",
    "Mental, Behavioral and Neurodevelopmental disorders",
    "Diseases of the genitourinary system",
    "Factors influencing health status and contact with health services",
    "Diseases of the digestive system",
    "Diseases of the respiratory system",
    "Diseases of the nervous system",
    "Endocrine, nutritional and metabolic diseases",
    "Diseases of the skin and subcutaneous tissue",
    "Injury, poisoning, and certain other consequences of external causes",
    "Neoplasm",
    "Certain infections and parasitic diseases",
)

MAX_SAMPLE_COUNT = len(FACS_OPTIONS)


def _init_balance(rng: random.Random) -> int:
    """25% small (200–600), 35% mid (600–1500), 40% large (1500–3000)."""
    r = rng.random()
    if r < 0.25:
        return rng.randint(200, 600)
    if r < 0.60:
        return rng.randint(600, 1500)
    return rng.randint(1500, 3000)


def _high_profile(rng: random.Random) -> dict[str, Any]:
    return {
        "zip5": rng.choice(["39564", "39563", "39562"]),
        "fc": rng.choice(["COMMERCIAL", "PREFERRED"]),
        "initBal": _init_balance(rng),
        "ptMs": rng.choice(["M", "S"]),
        "tuScore": rng.randint(780, 820),
        "bnkcrdAvlble": 1,
        "serviceType": rng.choice(["HB", "PB"]),
        "ptRepCode": "ACTIVE, PAPERLESS",
        "serviceArea": rng.choice(["LABORATORY", "DIAGNOSTIC TESTING"]),
        "serviceDescr": rng.choice(SERVICE_DESCR_OPTIONS),
        "age": rng.randint(35, 55),
        "ageOfAccount": rng.randint(30, 120),
    }


def _medium_profile(rng: random.Random) -> dict[str, Any]:
    return {
        "zip5": rng.choice(["39532", "39540", "39531"]),
        "fc": rng.choice(["MEDICARE", "HEALTHCARE"]),
        "initBal": _init_balance(rng),
        "ptMs": rng.choice(["M", "D", "S"]),
        "tuScore": rng.randint(700, 760),
        "bnkcrdAvlble": rng.choice([0, 1]),
        "serviceType": rng.choice(["HB", "PB"]),
        "ptRepCode": rng.choice(["PENDING", "PENDING, PAPER"]),
        "serviceArea": rng.choice(["OUTPATIENT SURGERY", "EMERGENCY"]),
        "serviceDescr": rng.choice(SERVICE_DESCR_OPTIONS),
        "age": rng.randint(50, 70),
        "ageOfAccount": rng.randint(120, 300),
    }


def _low_profile(rng: random.Random) -> dict[str, Any]:
    return {
        "zip5": rng.choice(["39503", "39553"]),
        "fc": "SELF-PAY",
        "initBal": _init_balance(rng),
        "ptMs": rng.choice(["W", "D"]),
        "tuScore": rng.randint(600, 670),
        "bnkcrdAvlble": 0,
        "serviceType": "HB",
        "ptRepCode": rng.choice(["DECLINED", "CODE EXP"]),
        "serviceArea": rng.choice(["INPATIENT ADMISSION", "OBSERVATION SERVICES"]),
        "serviceDescr": rng.choice(SERVICE_DESCR_OPTIONS),
        "age": rng.randint(65, 80),
        "ageOfAccount": rng.randint(240, 300),
    }


def generate_sample_accounts(count: int = 5, seed: Optional[int] = None) -> list[FeatureRecord]:
    """Generate ``count`` healthcare accounts in shuffled order.

    Args:
        count: Number of accounts, 1 to ``MAX_SAMPLE_COUNT``.
        seed:  Seed for ``random.Random``; ``None`` for a fresh batch.

    Raises:
        ValueError: If ``count`` is out of range.
    """
    if not 1 <= count <= MAX_SAMPLE_COUNT:
        raise ValueError(f"count must be between 1 and {MAX_SAMPLE_COUNT}, got {count}.")

    rng = random.Random(seed)
    facs_numbers = rng.sample(FACS_OPTIONS, count)

    n_high = count // 3
    n_medium = count // 3
    builders = (
        [_high_profile] * n_high
        + [_medium_profile] * n_medium
        + [_low_profile] * (count - n_high - n_medium)
    )

    records = [
        FeatureRecord(
            vertical=VerticalSlug.HEALTHCARE,
            account_id=facs,
            fields={"facsNumber": facs, **build(rng)},
        )
        for facs, build in zip(facs_numbers, builders)
    ]
    rng.shuffle(records)
    logger.debug("Generated %d sample account(s) (seed=%s).", len(records), seed)
    return records
