FALLBACK = "other"

# v1 plus packaging seen on retailer pages since: tins, tubes, cabinets,
# cases and sleeves.
PACKAGE_TYPES = [
    "single",
    "pack",
    "box",
    "bundle",
    "sampler",
    "tin",
    "tube",
    "cabinet",
    "case",
    "sleeve",
    "other",
    "unspecified",
]
