# jobs/tests/test_forms.py
from datetime import date, timedelta

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings

from jobs.forms import REQUIRED_MESSAGE, ApplicationForm, JobRoleForm


def role_data(**overrides):
    data = {
        'role_name': 'Software Engineer',
        'description': 'Build and maintain client services.',
        'responsibilities': 'Write, test and review code.',
        'job_spec_link': 'https://example.com/spec',
        'location': 'Belfast, Northern Ireland',
        'capability': 'Engineering',
        'band': 'Junior',
        'closing_date': (date.today() + timedelta(days=30)).isoformat(),
        'number_of_open_positions': '2',
    }
    data.update(overrides)
    return data


class JobRoleFormTest(SimpleTestCase):
    def test_valid_create(self):
        form = JobRoleForm(role_data())
        self.assertTrue(form.is_valid(), form.errors)
        role_input = form.to_input()
        self.assertEqual(role_input.status, 'Open')
        self.assertEqual(role_input.number_of_open_positions, 2)
        self.assertEqual(role_input.to_backend()['jobRoleName'], 'Software Engineer')

    def test_positions_default_to_one_on_create(self):
        form = JobRoleForm(role_data(number_of_open_positions=''))
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['number_of_open_positions'], 1)

    def test_create_form_has_no_status_field(self):
        self.assertNotIn('status', JobRoleForm().fields)
        self.assertIn('status', JobRoleForm(is_update=True).fields)

    def test_missing_field(self):
        form = JobRoleForm(role_data(description='  '))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.first_error(), REQUIRED_MESSAGE)

    def test_invalid_location(self):
        form = JobRoleForm(role_data(location='Atlantis'))
        self.assertFalse(form.is_valid())
        self.assertEqual(
            form.first_error(),
            'Invalid location: "Atlantis". Please select a valid location from the dropdown.')

    def test_positions_must_be_positive(self):
        form = JobRoleForm(role_data(number_of_open_positions='0'))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.first_error(), "Number of open positions must be at least 1.")

    def test_bad_date_format(self):
        form = JobRoleForm(role_data(closing_date='31/01/2030'))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.first_error(), "Invalid date format. Please use YYYY-MM-DD format.")

    def test_past_closing_date_only_rejected_on_create(self):
        past = (date.today() - timedelta(days=1)).isoformat()
        form = JobRoleForm(role_data(closing_date=past))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.first_error(), "Closing date cannot be in the past.")

        form = JobRoleForm(role_data(closing_date=past, status='Closed'), is_update=True)
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.to_input().status, 'Closed')

    def test_update_requires_valid_status(self):
        form = JobRoleForm(role_data(status='Paused'), is_update=True)
        self.assertFalse(form.is_valid())
        self.assertIn('Invalid status: "Paused"', form.first_error())

    def test_link_must_be_http(self):
        form = JobRoleForm(role_data(job_spec_link='ftp://example.com/spec'))
        self.assertFalse(form.is_valid())
        self.assertEqual(
            form.first_error(),
            "Invalid URL format for Job Spec Link. URL must start with http:// or https://")

    def test_length_checks(self):
        form = JobRoleForm(role_data(role_name='QA'))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.first_error(), "Role name must be at least 3 characters long.")

        form = JobRoleForm(role_data(responsibilities='Short'))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.first_error(), "Key responsibilities must be at least 10 characters long.")


def cv(name='cv.pdf', content=b'%PDF-1.4 test', content_type='application/pdf'):
    return SimpleUploadedFile(name, content, content_type=content_type)


class ApplicationFormTest(SimpleTestCase):
    def make(self, files=None, **overrides):
        data = {'applicant_name': "Seán O'Brien-Smith", 'applicant_email': 'sean@example.com', 'cover_letter': ''}
        data.update(overrides)
        return ApplicationForm(data, files if files is not None else {'cv': cv()})

    def test_valid(self):
        form = self.make()
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['applicant_name'], "Seán O'Brien-Smith")

    def test_name_rules(self):
        self.assertIn("Name must be at least 2 characters long", self.make(applicant_name='J').errors['applicant_name'])
        self.assertIn("Name can only contain letters, spaces, hyphens, and apostrophes",
                      self.make(applicant_name='John3').errors['applicant_name'])
        self.assertIn("Applicant name is required", self.make(applicant_name='').errors['applicant_name'])

    def test_email_rules(self):
        self.assertIn("Please provide a valid email address",
                      self.make(applicant_email='not-an-email').errors['applicant_email'])

    def test_cover_letter_limit(self):
        form = self.make(cover_letter='x' * 5001)
        self.assertIn("Cover letter must not exceed 5000 characters", form.errors['cover_letter'])

    def test_cv_required(self):
        form = self.make(files={})
        self.assertIn("CV file is required", form.errors['cv'])

    def test_cv_type(self):
        form = self.make(files={'cv': cv('cv.txt', b'hello', 'text/plain')})
        self.assertIn("CV must be in PDF, DOC, or DOCX format", form.errors['cv'])

    @override_settings(CV_MAX_UPLOAD_SIZE=10)
    def test_cv_size(self):
        form = self.make(files={'cv': cv(content=b'x' * 20)})
        self.assertIn("CV file size must not exceed 5MB", form.errors['cv'])

    def test_all_errors_reported(self):
        form = self.make(files={}, applicant_name='', applicant_email='')
        self.assertFalse(form.is_valid())
        self.assertEqual(
            form.error_summary(),
            "Applicant name is required. Email address is required. CV file is required")
