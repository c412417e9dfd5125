"""
Record key vocabulary of the website metadata table.

Keys are upper-cased, space-free identifiers joined to a record prefix with
"#", e.g. ITEM#ABC123 or SOURCESYSTEM#ALEPH#002097132. Index keys use the
same convention.
"""

KEY_SEPARATOR = "#"

# Key prefixes
ADDED = "ADDED"
DATELASTPROCESSED = "DATELASTPROCESSED"
FILE = "FILE"
FILEGROUP = "FILEGROUP"
FILEPATH = "FILEPATH"
FILESYSTEM = "FILESYSTEM"
FILETOPROCESS = "FILETOPROCESS"
INTERNALITEM = "INTERNALITEM"
ITEM = "ITEM"
ITEMTOHARVEST = "ITEMTOHARVEST"
PORTFOLIO = "PORTFOLIO"
PORTFOLIOCOLLECTION = "PORTFOLIOCOLLECTION"
PORTFOLIOITEM = "PORTFOLIOITEM"
PUBLIC = "PUBLIC"
SORT = "SORT"
SOURCESYSTEM = "SOURCESYSTEM"
SUBJECTTERM = "SUBJECTTERM"
SUPPLEMENTALDATA = "SUPPLEMENTALDATA"
URI = "URI"
USER = "USER"
WEBSITE = "WEBSITE"

# Values of the TYPE attribute
TYPE_ITEM = "Item"
TYPE_ITEM_TO_HARVEST = "ItemToHarvest"
TYPE_PARENT_OVERRIDE = "ParentOverride"
TYPE_PORTFOLIO_COLLECTION = "PortfolioCollection"
TYPE_PORTFOLIO_ITEM = "PortfolioItem"
TYPE_PORTFOLIO_USER = "PortfolioUser"
TYPE_SUPPLEMENTAL_DATA = "SupplementalData"
TYPE_WEBSITE_ITEM = "WebSiteItem"

# Website id used by supplemental data that applies to every website
ALL_WEBSITES = "ALL"

# Storage system whose file groups back the public website
WEBSITE_BUCKET_FILESYSTEM = "S3#RBSCWEBSITEBUCKET"


def key(prefix: str, *variables: str) -> str:
    """Compose a key from a prefix and VTL variable names.

    The result is meant to be placed in a quoted VTL string, where the
    variables are interpolated:

    >>> key(ITEM, "id")
    'ITEM#$id'
    >>> key(USER, "portfolioUserId", "portfolioCollectionId")
    'USER#$portfolioUserId#$portfolioCollectionId'
    """
    return KEY_SEPARATOR.join([prefix, *(f"${name}" for name in variables)])


def prefix_of(prefix: str) -> str:
    """Key prefix including the trailing separator, for begins_with conditions."""
    return f"{prefix}{KEY_SEPARATOR}"
