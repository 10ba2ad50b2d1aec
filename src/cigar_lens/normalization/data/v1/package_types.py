FALLBACK = "other"

PACKAGE_TYPES = [
    "single",
    "pack",
    "box",
    "bundle",
    "sampler",
    "other",
    "unspecified",
]
