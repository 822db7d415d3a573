"""
Google Ads API integration for keyword bid adjustment.

Handles:
- Client authentication (google-ads.yaml)
- Keyword queries filtered/sorted by impression share (GAQL over keyword_view)
- Keyword CPC bid updates
- Account time zone lookup
- Error handling (GoogleAdsException -> KeywordSourceError)
"""

from typing import List

from google.ads.googleads.client import GoogleAdsClient
from google.ads.googleads.errors import GoogleAdsException

from act_bidshare.date_range import DateRange
from act_bidshare.errors import ConfigError, KeywordSourceError
from act_bidshare.keyword_source import KeywordSelection, KeywordSource
from act_bidshare.logging_config import setup_logging
from act_bidshare.models import KeywordRecord

logger = setup_logging(__name__)

MICROS_PER_UNIT = 1_000_000
# Bids must be a multiple of the billable unit (0.01 in most currencies)
BILLABLE_UNIT_MICROS = 10_000


def load_google_ads_client(config_path: str) -> GoogleAdsClient:
    """
    Load Google Ads API client from YAML configuration.

    Args:
        config_path: Path to google-ads.yaml file

    Returns:
        GoogleAdsClient instance

    Raises:
        ConfigError: If the file is missing or not a usable client configuration
    """
    logger.info(f"Loading Google Ads client from {config_path}")

    try:
        client = GoogleAdsClient.load_from_storage(config_path)
        logger.info("Google Ads client loaded successfully")
        return client
    except FileNotFoundError as e:
        logger.error(f"Config file not found: {config_path}")
        raise ConfigError(f"google-ads.yaml not found: {config_path}") from e
    except Exception as e:
        logger.error(f"Failed to load Google Ads client: {str(e)}")
        raise ConfigError(f"Could not load Google Ads client from {config_path}: {e}") from e


def micros_to_units(micros) -> float:
    return (micros or 0) / MICROS_PER_UNIT


def units_to_micros(value: float) -> int:
    """Currency units -> micros, rounded to the nearest billable unit."""
    units = round(value * MICROS_PER_UNIT / BILLABLE_UNIT_MICROS)
    return int(units * BILLABLE_UNIT_MICROS)


def build_keyword_query(selection: KeywordSelection, date_range: DateRange) -> str:
    """
    GAQL for enabled keywords whose impression share is past a threshold.

    Example (raise, absolute top):
        SELECT ... FROM keyword_view
        WHERE ad_group_criterion.status = 'ENABLED'
            AND metrics.search_absolute_top_impression_share < 0.75
            AND segments.date BETWEEN '2026-10-11' AND '2026-10-17'
        ORDER BY metrics.search_absolute_top_impression_share ASC
    """
    metric_field = selection.metric.gaql_field
    return f"""
        SELECT
            ad_group.id,
            ad_group_criterion.criterion_id,
            ad_group_criterion.keyword.text,
            ad_group_criterion.status,
            ad_group_criterion.effective_cpc_bid_micros,
            ad_group_criterion.position_estimates.first_page_cpc_micros,
            ad_group_criterion.position_estimates.top_of_page_cpc_micros,
            metrics.impressions,
            {metric_field}
        FROM keyword_view
        WHERE ad_group_criterion.status = '{selection.status}'
            AND {metric_field} {selection.comparison} {selection.threshold!r}
            AND {date_range.as_gaql_condition()}
        ORDER BY {metric_field} {selection.order}
    """


def _format_google_ads_error(ex: GoogleAdsException) -> str:
    error_message = f"Request ID: {ex.request_id}\n"
    for error in ex.failure.errors:
        error_message += f"Error: {error.message}\n"
    return error_message


class GoogleAdsKeywordSource(KeywordSource):
    """KeywordSource backed by a live Google Ads account."""

    def __init__(self, client: GoogleAdsClient, customer_id: str):
        """
        Args:
            client: GoogleAdsClient instance
            customer_id: Customer ID (digits only, no dashes)
        """
        self.client = client
        self.customer_id = customer_id

    def query_keywords(self, selection: KeywordSelection, date_range: DateRange) -> List[KeywordRecord]:
        ga_service = self.client.get_service("GoogleAdsService")
        query = build_keyword_query(selection, date_range)
        logger.debug(f"GAQL: {query}")

        try:
            response = ga_service.search(customer_id=self.customer_id, query=query)
            keywords = []

            for row in response:
                criterion = row.ad_group_criterion
                keywords.append(
                    KeywordRecord(
                        ad_group_id=str(row.ad_group.id),
                        criterion_id=str(criterion.criterion_id),
                        impression_share=getattr(row.metrics, selection.metric.value),
                        impressions=int(row.metrics.impressions),
                        cpc=micros_to_units(criterion.effective_cpc_bid_micros),
                        first_page_cpc=micros_to_units(criterion.position_estimates.first_page_cpc_micros),
                        top_of_page_cpc=micros_to_units(criterion.position_estimates.top_of_page_cpc_micros),
                        keyword_text=criterion.keyword.text,
                        status=criterion.status.name,
                    )
                )

        except GoogleAdsException as ex:
            logger.error(f"Failed to fetch keywords ({selection.describe()}): {ex}")
            raise KeywordSourceError(_format_google_ads_error(ex), request_id=ex.request_id) from ex

        logger.info(f"Fetched {len(keywords)} keywords: {selection.describe()}")
        return keywords

    def set_bid(self, keyword: KeywordRecord, new_cpc: float) -> None:
        update_keyword_bid(
            self.client,
            self.customer_id,
            keyword.ad_group_id,
            keyword.criterion_id,
            units_to_micros(new_cpc),
        )

    def account_timezone(self) -> str:
        ga_service = self.client.get_service("GoogleAdsService")
        query = """
            SELECT customer.time_zone
            FROM customer
            LIMIT 1
        """

        try:
            response = ga_service.search(customer_id=self.customer_id, query=query)
            for row in response:
                return row.customer.time_zone
        except GoogleAdsException as ex:
            logger.error(f"Failed to fetch account time zone: {ex}")
            raise KeywordSourceError(_format_google_ads_error(ex), request_id=ex.request_id) from ex

        raise KeywordSourceError(f"Customer {self.customer_id} not found")


def update_keyword_bid(
    client: GoogleAdsClient,
    customer_id: str,
    ad_group_id: str,
    keyword_id: str,
    new_bid_micros: int,
) -> str:
    """
    Update keyword CPC bid.

    Args:
        client: GoogleAdsClient instance
        customer_id: Customer ID
        ad_group_id: Ad group ID
        keyword_id: Keyword criterion ID
        new_bid_micros: New bid in micros

    Returns:
        Resource name of the updated criterion

    Raises:
        KeywordSourceError: If API call fails
    """
    ad_group_criterion_service = client.get_service("AdGroupCriterionService")

    operation = client.get_type("AdGroupCriterionOperation")
    criterion = operation.update
    criterion.resource_name = ad_group_criterion_service.ad_group_criterion_path(
        customer_id, ad_group_id, keyword_id
    )
    criterion.cpc_bid_micros = new_bid_micros
    operation.update_mask.paths.append("cpc_bid_micros")

    try:
        response = ad_group_criterion_service.mutate_ad_group_criteria(
            customer_id=customer_id, operations=[operation]
        )
    except GoogleAdsException as ex:
        logger.error(f"Failed to update keyword bid: {ex}")
        raise KeywordSourceError(_format_google_ads_error(ex), request_id=ex.request_id) from ex

    logger.info(f"Updated keyword {keyword_id} bid to {new_bid_micros} micros")
    return response.results[0].resource_name
