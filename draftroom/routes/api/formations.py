"""
Formation catalog endpoint.
"""

from draftroom.formations import SOCCER_FORMATIONS
from draftroom.routes import api_bp
from draftroom.utils import success_response


@api_bp.route('/formations', methods=['GET'])
def list_formations():
    """List the soccer formations accepted by team submission."""
    return success_response(formations=[f.to_dict() for f in SOCCER_FORMATIONS])
