# accounts/context_processors.py
from .decorators import is_admin, session_user

PROFILE_COLORS = (
    'from-blue-500 to-purple-600',
    'from-green-500 to-blue-600',
    'from-purple-500 to-pink-600',
    'from-yellow-500 to-orange-600',
    'from-red-500 to-pink-600',
    'from-indigo-500 to-blue-600',
    'from-teal-500 to-green-600',
    'from-orange-500 to-red-600',
)


def profile_color(name):
    """Stable colour class for a user's avatar."""
    h = 0
    for ch in name:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return PROFILE_COLORS[abs(h) % len(PROFILE_COLORS)]


def auth_context(request):
    user = session_user(request)
    return {
        'is_authenticated': user is not None,
        'user': user,
        'is_admin': is_admin(user),
        'profile_color': profile_color(user.get('email') or '') if user else None,
    }
