from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional

from chalice import Response

from chalicelib.constants.constants import LOYALTY_TIERS, LOYALTY_REWARDS
from chalicelib.constants.status_codes import http200
from chalicelib.customers import CustomerAccount
from chalicelib.utils import app as utils_app, exceptions
from chalicelib.utils.data import parse_raw_body
from chalicelib.utils.logger import logger


def get_tier(points: int) -> Dict:
    for tier in LOYALTY_TIERS:
        if points >= tier['min_points'] and (tier['max_points'] is None or points <= tier['max_points']):
            return tier
    return LOYALTY_TIERS[0]


def get_next_tier(points: int) -> Optional[Dict]:
    return next((tier for tier in LOYALTY_TIERS if tier['min_points'] > points), None)


def get_loyalty_summary(points: int) -> Dict:
    """
    Current tier, next tier, points left to the next tier and progress in percent (100 on the top tier)
    """
    tier, next_tier = get_tier(points), get_next_tier(points)
    if next_tier is None:
        points_to_next_tier, progress = 0, Decimal(100)
    else:
        points_to_next_tier = next_tier['min_points'] - points
        progress = Decimal(points - tier['min_points']) * 100 / (next_tier['min_points'] - tier['min_points'])
    return {
        'points': points,
        'current_tier': tier,
        'next_tier': next_tier,
        'points_to_next_tier': points_to_next_tier,
        'progress': progress.quantize(Decimal('1.0'), rounding=ROUND_HALF_UP),
        'tiers': LOYALTY_TIERS,
        'rewards': [{**reward, 'available': points >= reward['points']} for reward in LOYALTY_REWARDS]
    }


def get_reward(reward_id) -> Dict:
    reward = next((reward for reward in LOYALTY_REWARDS if reward['id'] == reward_id), None)
    if reward is None:
        raise exceptions.RecordNotFound(f'Reward {reward_id} not found')
    return reward


def redeem_reward(account: CustomerAccount, reward_id) -> Dict:
    reward = get_reward(reward_id)
    points = account.loyalty_points
    if points < reward['points']:
        raise exceptions.NotEnoughPoints(f'{reward["name"]} requires {reward["points"]} points, you have {points}')
    account.spend_points(reward['points'])
    logger.info(f"redeem_reward ::: {reward_id=} redeemed by {account.user_id}, "
                f"loyalty_points={account.loyalty_points}")
    return reward


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_get_loyalty(request) -> Response:
    account = CustomerAccount.init_request_account(request)
    return Response(status_code=http200, body=get_loyalty_summary(account.loyalty_points))


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_redeem_reward(request) -> Response:
    account = CustomerAccount.init_request_account(request)
    reward_id = parse_raw_body(request).get('reward_id')
    if not reward_id:
        raise exceptions.MandatoryFieldsAreNotFilled('reward_id is required')
    reward = redeem_reward(account, reward_id)
    return Response(status_code=http200, body={
        **get_loyalty_summary(account.loyalty_points),
        'message': f'{reward["name"]} redeemed!'
    })
