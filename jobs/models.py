# jobs/models.py
# Job roles and applications are owned by the backend API; these are the
# read-only records the front end maps backend payloads into.
from dataclasses import dataclass, field, asdict
from typing import List, Optional


def normalize_list_status(status):
    if isinstance(status, str) and status.lower() == 'open':
        return 'Open'
    return 'Closed'


@dataclass
class JobRole:
    job_role_id: int
    role_name: str
    location: str
    capability: str
    band: str
    closing_date: str
    status: str = 'Closed'
    number_of_open_positions: int = 0

    @classmethod
    def from_backend(cls, data):
        return cls(
            job_role_id=data.get('id'),
            role_name=data.get('jobRoleName', ''),
            location=data.get('location', ''),
            capability=data.get('capability', ''),
            band=data.get('band', ''),
            closing_date=data.get('closingDate', ''),
            status=normalize_list_status(data.get('status')),
            number_of_open_positions=data.get('numberOfOpenPositions') or 0,
        )


@dataclass
class JobRoleDetail:
    job_role_id: int
    role_name: str
    description: str
    responsibilities: str
    job_spec_link: str
    location: str
    capability: str
    band: str
    closing_date: str
    status: str
    number_of_open_positions: int

    @classmethod
    def from_backend(cls, data):
        return cls(
            job_role_id=data.get('id'),
            role_name=data.get('jobRoleName', ''),
            description=data.get('description') or '',
            responsibilities=data.get('responsibilities') or '',
            job_spec_link=data.get('jobSpecLink') or '',
            location=data.get('location', ''),
            capability=data.get('capability', ''),
            band=data.get('band', ''),
            closing_date=data.get('closingDate', ''),
            status=data.get('status') or '',
            number_of_open_positions=data.get('numberOfOpenPositions') or 0,
        )

    def is_accepting_applications(self):
        return self.number_of_open_positions > 0 and self.status.lower() == 'open'

    def as_form_initial(self):
        return asdict(self)


@dataclass
class JobRoleInput:
    """Validated job role fields, ready to send to the backend."""
    role_name: str
    description: str
    responsibilities: str
    job_spec_link: str
    location: str
    capability: str
    band: str
    closing_date: str
    status: str
    number_of_open_positions: int

    def to_backend(self):
        return {
            'jobRoleName': self.role_name,
            'description': self.description,
            'responsibilities': self.responsibilities,
            'jobSpecLink': self.job_spec_link,
            'location': self.location,
            'capability': self.capability,
            'band': self.band,
            'closingDate': self.closing_date,
            'status': self.status,
            'numberOfOpenPositions': self.number_of_open_positions,
        }


@dataclass
class FilterOptions:
    capabilities: List[str]
    locations: List[str]
    bands: List[str]


@dataclass
class Application:
    application_id: int
    job_role_id: int
    applicant_name: str
    applicant_email: str
    status: str
    submitted_at: str
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    updated_at: Optional[str] = None
    has_cv: bool = False
    cv_file_name: Optional[str] = None
    job_role_name: Optional[str] = None

    @classmethod
    def from_backend(cls, data):
        job_role = data.get('jobRole') or {}
        return cls(
            application_id=data.get('id'),
            job_role_id=data.get('jobRoleId') or job_role.get('id'),
            applicant_name=data.get('applicantName', ''),
            applicant_email=data.get('applicantEmail', ''),
            status=data.get('status', ''),
            submitted_at=data.get('submittedAt', ''),
            cover_letter=data.get('coverLetter'),
            resume_url=data.get('resumeUrl'),
            updated_at=data.get('updatedAt'),
            has_cv=bool(data.get('hasCv') or data.get('cvFileName')),
            cv_file_name=data.get('cvFileName'),
            job_role_name=job_role.get('jobRoleName'),
        )


@dataclass
class ApplicantsPagination:
    current_page: int
    total_pages: int
    total_applicants: int
    applicants_per_page: int
    has_next_page: bool
    has_previous_page: bool


@dataclass
class ApplicantsPage:
    applicants: List[Application]
    pagination: ApplicantsPagination
    job_role: dict = field(default_factory=dict)


@dataclass
class CvFile:
    content: bytes
    file_name: str
    mime_type: str
