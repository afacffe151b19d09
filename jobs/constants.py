# jobs/constants.py
# Fixed vocabularies accepted by the backend for job roles.

VALID_LOCATIONS = (
    'Belfast, Northern Ireland',
    'Birmingham, England',
    'Derry~Londonderry, Northern Ireland',
    'Dublin, Ireland',
    'London, England',
    'Gdansk, Poland',
    'Helsinki, Finland',
    'Paris, France',
    'Antwerp, Belgium',
    'Buenos Aires, Argentina',
    'Indianapolis, United States',
    'Nova Scotia, Canada',
    'Toronto, Canada',
    'Remote',
)

VALID_CAPABILITIES = (
    'Engineering',
    'Analytics',
    'Product',
    'Design',
    'Quality Assurance',
    'Documentation',
    'Testing',
)

VALID_BANDS = ('Junior', 'Mid', 'Senior')

VALID_STATUSES = ('Open', 'Closed', 'On Hold')

APPLICATION_STATUS_PENDING = 'pending'
APPLICATION_STATUS_ACCEPTED = 'accepted'
APPLICATION_STATUS_REJECTED = 'rejected'

ADMIN_ROLE = 'Admin'
