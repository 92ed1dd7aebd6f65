"""Static county map / parcel viewer providers.

``url_template`` placeholders: ``{address}`` (full address), ``{shortAddress}``
(street only), ``{lat}`` and ``{lng}``. Providers that cannot take an address
in the URL open their landing page.
"""
from address_verifier.core.models import CountyProviderRecord

COUNTY_PROVIDERS = (
    CountyProviderRecord(
        key="stlouis-county-mo",
        label="St. Louis County (MO) Property Viewer",
        county_name_match="St. Louis",
        alias_names=("Saint Louis", "St Louis County"),
        state_codes=("MO",),
        can_prefill_address=False,
        url_template="https://gis.stlouiscountymo.gov/propertyview/",
    ),
    CountyProviderRecord(
        key="stlouis-county-mn",
        label="St. Louis County (MN) Land Explorer",
        county_name_match="St. Louis",
        alias_names=("Saint Louis",),
        state_codes=("MN",),
        can_prefill_address=False,
        url_template="https://gis.stlouiscountymn.gov/landexplorer/",
    ),
    CountyProviderRecord(
        key="stlouis-city-mo",
        label="City of St. Louis Address Search",
        county_name_match="St. Louis City",
        alias_names=("City of St. Louis", "Saint Louis City"),
        state_codes=("MO",),
        can_prefill_address=True,
        url_template="https://www.stlouis-mo.gov/data/address-search/index.cfm?addr={shortAddress}",
    ),
    CountyProviderRecord(
        key="cook-il",
        label="Cook County Assessor",
        county_name_match="Cook",
        state_codes=("IL",),
        can_prefill_address=True,
        url_template="https://www.cookcountyassessor.com/address-search#address={shortAddress}",
    ),
    CountyProviderRecord(
        key="franklin-oh",
        label="Franklin County (OH) Auditor",
        county_name_match="Franklin",
        state_codes=("OH",),
        can_prefill_address=False,
        url_template="https://property.franklincountyauditor.com/_web/search/commonsearch.aspx?mode=address",
    ),
    CountyProviderRecord(
        key="franklin-mo",
        label="Franklin County (MO) GIS",
        county_name_match="Franklin",
        state_codes=("MO",),
        can_prefill_address=False,
        url_template="https://franklinmo.net/gis/",
    ),
    CountyProviderRecord(
        key="maricopa-az",
        label="Maricopa County Assessor",
        county_name_match="Maricopa",
        state_codes=("AZ",),
        can_prefill_address=True,
        url_template="https://mcassessor.maricopa.gov/mcs/?q={shortAddress}&mod=pd",
    ),
    CountyProviderRecord(
        key="king-wa",
        label="King County Parcel Viewer",
        county_name_match="King",
        state_codes=("WA",),
        can_prefill_address=False,
        url_template="https://gismaps.kingcounty.gov/parcelviewer2/",
    ),
    CountyProviderRecord(
        key="harris-tx",
        label="Harris County Appraisal District",
        county_name_match="Harris",
        state_codes=("TX",),
        can_prefill_address=False,
        url_template="https://hcad.org/property-search/property-search",
    ),
    CountyProviderRecord(
        key="los-angeles-ca",
        label="Los Angeles County Assessor Portal",
        county_name_match="Los Angeles",
        alias_names=("LA",),
        state_codes=("CA",),
        can_prefill_address=True,
        url_template="https://portal.assessor.lacounty.gov/search?search={shortAddress}",
    ),
    CountyProviderRecord(
        key="miami-dade-fl",
        label="Miami-Dade Property Search",
        county_name_match="Miami-Dade",
        alias_names=("Miami Dade", "Dade"),
        state_codes=("FL",),
        can_prefill_address=False,
        url_template="https://www.miamidade.gov/Apps/PA/propertysearch/",
    ),
    CountyProviderRecord(
        key="prince-georges-md",
        label="Prince George's County PGAtlas",
        county_name_match="Prince George's",
        alias_names=("Prince Georges",),
        state_codes=("MD",),
        can_prefill_address=False,
        url_template="https://www.pgatlas.com/?center={lng},{lat}&level=18",
    ),
    CountyProviderRecord(
        key="st-lucie-fl",
        label="St. Lucie County Property Appraiser",
        county_name_match="St. Lucie",
        alias_names=("Saint Lucie",),
        state_codes=("FL",),
        can_prefill_address=False,
        url_template="https://www.paslc.gov/real-estate/property-search",
    ),
    CountyProviderRecord(
        key="dc",
        label="DC Office of Tax and Revenue Real Property Search",
        county_name_match="District of Columbia",
        alias_names=("Washington",),
        state_codes=("DC",),
        can_prefill_address=True,
        url_template="https://mytax.dc.gov/_/#3?address={shortAddress}",
    ),
)
