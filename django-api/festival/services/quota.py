"""Quota accounting: how many registrations a user holds per bucket."""

from collections import Counter
from collections.abc import Iterable

from festival.domain import Program, QuotaBucket, QuotaCounts, QuotaLimits, Registration
from festival.stores.interfaces import ConfigProvider


def count_quota(
    registrations: Iterable[Registration],
    tentative: Iterable[Program] = (),
) -> QuotaCounts:
    """Count non-cancelled registrations per bucket.

    ``registrations`` holds everything the user leads or is a member of;
    ``tentative`` holds programs accepted earlier in the same batch but not
    yet visible in ``registrations``.
    """
    buckets: Counter[QuotaBucket] = Counter()
    seen = set()
    for registration in registrations:
        if not registration.is_active or registration.id in seen:
            continue
        seen.add(registration.id)
        buckets[registration.program.bucket] += 1
    for program in tentative:
        buckets[program.bucket] += 1
    return QuotaCounts(
        on_stage_solo=buckets[QuotaBucket.ON_STAGE_SOLO],
        on_stage_group=buckets[QuotaBucket.ON_STAGE_GROUP],
        off_stage_total=buckets[QuotaBucket.OFF_STAGE_TOTAL],
    )


def load_limits(provider: ConfigProvider, default: int = 0) -> QuotaLimits:
    """Read the three quota limits; a missing key falls back to ``default``."""

    def read(bucket: QuotaBucket) -> int:
        value = provider.get_int(bucket.limit_key)
        return default if value is None else value

    return QuotaLimits(
        max_on_stage_solo=read(QuotaBucket.ON_STAGE_SOLO),
        max_on_stage_group=read(QuotaBucket.ON_STAGE_GROUP),
        max_off_stage_total=read(QuotaBucket.OFF_STAGE_TOTAL),
    )


def has_room(counts: QuotaCounts, limits: QuotaLimits, bucket: QuotaBucket) -> bool:
    """True when one more registration fits under the bucket's maximum."""
    return counts.for_bucket(bucket) < limits.for_bucket(bucket)
