# db/models.py
"""
Supabase does not require ORM model classes.
Tables created in the Supabase dashboard (all have id uuid PK, created_at, updated_at):

Table: bookings
- user_id (uuid, FK → auth.users)
- service_type (text)
- bedrooms (int), bathrooms (int)
- scheduled_date (date), scheduled_time (text)
- total_price (int)
- status (text: pending/confirmed/in_progress/completed/cancelled)

Table: quote_requests
- user_id (uuid)
- service_type (text: removals/care/<quote-based cleaning id>)
- care_type, frequency, pickup_suburb, dropoff_suburb (text, nullable)
- item_description, special_requirements, photo_url (text, nullable)
- status (text: pending/quoted/accepted/declined/completed)
- admin_notes (text, nullable)

Table: worker_applications
- full_name, contact_number, area, work_type (text)
- years_experience, additional_notes (text, nullable)
- cv_url, id_document_url, photo_url (text, nullable)
- status (text: pending/approved/rejected)
- admin_notes (text, nullable)

Table: profiles
- user_id (uuid, unique)
- first_name, last_name (text)
- address, unit_number, complex_name, street_address, suburb, city, province, postal_code (text, nullable)
- latitude, longitude (float, nullable)
- profile_picture_url (text, nullable)
- worker_status (enum worker_status: pending_approval/approved/rejected, nullable)
- profile_completed (bool)

Table: user_roles
- user_id (uuid)
- role (enum app_role: admin/moderator/user/client/worker)

Table: enquiries
- full_name, contact_number, area_suburb, service_required (text)
- preferred_date (date, nullable), additional_notes (text, nullable)
- status (text)

Storage buckets: profile-pictures, worker-documents
"""

from __future__ import annotations

BOOKINGS = "bookings"
QUOTE_REQUESTS = "quote_requests"
WORKER_APPLICATIONS = "worker_applications"
PROFILES = "profiles"
USER_ROLES = "user_roles"
ENQUIRIES = "enquiries"

PROFILE_PICTURES_BUCKET = "profile-pictures"
WORKER_DOCUMENTS_BUCKET = "worker-documents"

BOOKING_STATUSES = ("pending", "confirmed", "in_progress", "completed", "cancelled")
QUOTE_STATUSES = ("pending", "quoted", "accepted", "declined", "completed")
APPLICATION_STATUSES = ("pending", "approved", "rejected")
WORKER_STATUSES = ("pending_approval", "approved", "rejected")

APP_ROLES = ("admin", "moderator", "user", "client", "worker")
SIGNUP_ROLES = ("client", "worker")

# Statuses a collection accepts in the admin views.
STATUS_OPTIONS = {
    BOOKINGS: BOOKING_STATUSES,
    QUOTE_REQUESTS: QUOTE_STATUSES,
    WORKER_APPLICATIONS: APPLICATION_STATUSES,
}
