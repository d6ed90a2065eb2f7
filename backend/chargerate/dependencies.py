from chargerate.services.rate_resolver import RateResolver, get_default_resolver


def get_rate_resolver() -> RateResolver:
    """Shared resolver; tests override this to inject a fake client and clock."""
    return get_default_resolver()
