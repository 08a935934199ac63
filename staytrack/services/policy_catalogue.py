"""Built-in stay policy catalogue (visa-free rules as of mid 2024).

Loaded once. The host seeds it into the policy_rules table on first startup
and can then edit rows there.
"""
from datetime import date

from staytrack.domain import CalculationMethod, NationalityOverride, PolicyType, StayPolicy

POLICY_CATALOGUE: tuple[StayPolicy, ...] = (
    StayPolicy(
        jurisdiction_code="VN",
        jurisdiction_name="Vietnam",
        calculation_method=CalculationMethod.per_entry,
        max_days_per_stay=45,
        description="45 days visa-free per entry",
        restrictions=(
            "Up to 45 consecutive days per entry",
            "A new 45-day allowance starts on each re-entry",
            "Longer stays require a visa",
        ),
        sources=("Embassy of Vietnam",),
        last_updated=date(2024, 8, 15),
        nationality_overrides={
            "KR": NationalityOverride(
                CalculationMethod.per_entry,
                max_days_per_stay=45,
                description="45 days visa-free (permanent)",
                restrictions=("45 consecutive days per entry",),
            ),
            "JP": NationalityOverride(
                CalculationMethod.per_entry,
                max_days_per_stay=15,
                description="15 days visa-free",
                restrictions=("15 consecutive days per entry",),
            ),
            "US": NationalityOverride(
                CalculationMethod.visa_validity,
                max_days_per_stay=90,
                max_days_per_period=90,
                period_length_days=90,
                description="E-visa required, valid for 90 days from issuance",
                restrictions=("No visa-free entry",),
            ),
        },
    ),
    StayPolicy(
        jurisdiction_code="TH",
        jurisdiction_name="Thailand",
        calculation_method=CalculationMethod.calendar_year,
        max_days_per_stay=60,
        max_days_per_period=180,
        period_length_days=365,
        description="60 days per entry, 180 days per calendar year",
        restrictions=(
            "Up to 60 consecutive days per entry",
            "No more than 180 days in total per calendar year (January to December)",
            "Exceeding the annual total may bar entry until the next year",
        ),
        sources=("Royal Thai Embassy", "Thai Immigration Bureau"),
        last_updated=date(2024, 7, 1),
        nationality_overrides={
            "JP": NationalityOverride(
                CalculationMethod.per_entry,
                max_days_per_stay=30,
                description="30 days visa-free",
                restrictions=("30 days per entry",),
            ),
            "US": NationalityOverride(
                CalculationMethod.per_entry,
                max_days_per_stay=30,
                description="30 days visa-free",
                restrictions=("30 days per entry",),
            ),
        },
    ),
    StayPolicy(
        jurisdiction_code="MY",
        jurisdiction_name="Malaysia",
        calculation_method=CalculationMethod.per_entry,
        max_days_per_stay=90,
        description="90 days visa-free for tourism",
        restrictions=(
            "Up to 90 days per entry",
            "Re-entry after exit is at the officer's discretion",
            "Proof of sufficient funds may be requested",
        ),
        sources=("Embassy of Malaysia",),
        last_updated=date(2024, 6, 1),
    ),
    StayPolicy(
        jurisdiction_code="JP",
        jurisdiction_name="Japan",
        calculation_method=CalculationMethod.rolling_window,
        max_days_per_stay=90,
        max_days_per_period=90,
        period_length_days=180,
        description="90 days in any 180-day period",
        restrictions=(
            "Up to 90 days in any 180-day period",
            "Tourism or business purposes only",
        ),
        sources=("Ministry of Foreign Affairs of Japan",),
        last_updated=date(2024, 6, 1),
    ),
    StayPolicy(
        jurisdiction_code="PH",
        jurisdiction_name="Philippines",
        calculation_method=CalculationMethod.rolling_window,
        max_days_per_stay=30,
        max_days_per_period=30,
        period_length_days=180,
        description="30 days visa-free",
    ),
    StayPolicy(
        jurisdiction_code="ID",
        jurisdiction_name="Indonesia",
        calculation_method=CalculationMethod.rolling_window,
        max_days_per_stay=30,
        max_days_per_period=30,
        period_length_days=180,
        description="30 days visa-free",
    ),
    StayPolicy(
        jurisdiction_code="SG",
        jurisdiction_name="Singapore",
        calculation_method=CalculationMethod.rolling_window,
        max_days_per_stay=90,
        max_days_per_period=90,
        period_length_days=180,
        description="90 days visa-free",
    ),
    StayPolicy(
        jurisdiction_code="TW",
        jurisdiction_name="Taiwan",
        calculation_method=CalculationMethod.rolling_window,
        max_days_per_stay=90,
        max_days_per_period=90,
        period_length_days=180,
        description="90 days visa-free",
    ),
    StayPolicy(
        jurisdiction_code="AU",
        jurisdiction_name="Australia",
        calculation_method=CalculationMethod.visa_validity,
        policy_type=PolicyType.visa_required,
        max_days_per_stay=90,
        max_days_per_period=90,
        period_length_days=365,
        description="ETA required: up to 90 days per visit within 12 months of issuance",
        restrictions=("Apply for an ETA before travel",),
    ),
    StayPolicy(
        jurisdiction_code="SCHENGEN",
        jurisdiction_name="Schengen Area",
        calculation_method=CalculationMethod.rolling_window,
        max_days_per_stay=90,
        max_days_per_period=90,
        period_length_days=180,
        description="90 days in any 180-day period across all Schengen states",
        restrictions=("Days in every Schengen member state count towards one total",),
        sources=("European Commission",),
        last_updated=date(2024, 1, 1),
    ),
    StayPolicy(
        jurisdiction_code="GB",
        jurisdiction_name="United Kingdom",
        calculation_method=CalculationMethod.entry_anchored_annual,
        policy_type=PolicyType.special,
        max_days_per_stay=180,
        max_days_per_period=180,
        period_length_days=365,
        description="Up to 180 days within 12 months of first entry",
        restrictions=("Frequent long visits may be refused",),
    ),
)
