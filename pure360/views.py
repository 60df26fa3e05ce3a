"""Client- and worker-facing pages. Each render_* function draws one route."""

from __future__ import annotations

from datetime import date
import logging

import streamlit as st

from pure360 import address as addr
from pure360 import auth
from pure360 import booking_flow as bf
from pure360 import routing
from pure360.config import AppConfig
from pure360.db import models
from pure360.db.database import DataAccessError, cached_query, get_supabase_client, select_rows
from pure360.enquiries import (
    ENQUIRY_SERVICES,
    EXPERIENCE_OPTIONS,
    WORK_TYPES,
    EnquiryState,
    WorkerApplicationState,
    submit_application,
    submit_enquiry,
)
from pure360.forms import form_state, queue_toast, reset_form, show_field_errors
from pure360.onboarding import complete_profile, from_profile
from pure360.pricing import (
    MAX_ROOMS,
    MIN_ROOMS,
    TIME_SLOTS,
    format_rand,
    instant_book_services,
    quote_based_services,
)
from pure360.quotes import (
    CARE_TYPES,
    FREQUENCIES,
    CareQuoteState,
    CleaningQuoteState,
    RemovalsQuoteState,
    submit_quote,
)
from pure360.tools import send_booking_confirmation, whatsapp_link

logger = logging.getLogger(__name__)


def navigate(path: str) -> None:
    st.session_state.current_path = path
    st.rerun()


def _sign_in_redirect(message: str) -> None:
    queue_toast(message, icon="🔒")
    navigate(routing.AUTH)


# ----------------- PUBLIC PAGES ------------------------

def render_home(cfg: AppConfig):
    st.title("🏠 Pure360")
    st.caption("Trusted cleaning, removals and care services in Cape Town.")

    c1, c2, c3 = st.columns(3)
    if c1.button("🧽 Book a clean", use_container_width=True):
        navigate("/cleaning")
    if c2.button("🚚 Removals quote", use_container_width=True):
        navigate("/removals")
    if c3.button("❤️ Care quote", use_container_width=True):
        navigate("/care")

    st.divider()
    st.subheader("Send us an enquiry")
    render_enquiry_form()
    st.link_button("💬 Chat on WhatsApp", whatsapp_link(cfg.contact.whatsapp_number))


def render_services(cfg: AppConfig):
    st.title("Our Services")
    st.subheader("Instant booking")
    for s in instant_book_services():
        st.markdown(f"- **{s.name}**: {s.description}" + (f" ({s.price_info})" if s.price_info else ""))
    st.subheader("Request a quote")
    for s in quote_based_services():
        st.markdown(f"- **{s.name}**: {s.description}")
    st.markdown("- **Removals**: furniture moving and rubble removal")
    st.markdown("- **Care**: elderly companion and nursing care")


def render_enquiry_form():
    state: EnquiryState = form_state("enquiry_form", EnquiryState)
    if state.submitted:
        st.success("Thank you for your request. A PURE360 team member will contact you via WhatsApp shortly.")
        return

    with st.form("enquiry"):
        state.full_name = st.text_input("Full Name", value=state.full_name)
        state.contact_number = st.text_input("Contact Number", value=state.contact_number)
        state.area_suburb = st.text_input("Area / Suburb", value=state.area_suburb)
        state.service_required = st.selectbox(
            "Service Required",
            list(ENQUIRY_SERVICES),
            format_func=ENQUIRY_SERVICES.get,
            index=None,
        ) or ""
        state.preferred_date = st.date_input("Preferred Date (optional)", value=None, min_value=date.today())
        state.additional_notes = st.text_area("Additional Notes", value=state.additional_notes, max_chars=500)
        sent = st.form_submit_button("Send enquiry", disabled=state.locked)

    if sent:
        result = submit_enquiry(state)
        if result.success:
            st.rerun()
        elif state.errors:
            show_field_errors(state.errors)
        elif state.last_error:
            st.error("Something went wrong. Please try again or contact us via WhatsApp.")


def render_work_with_us(cfg: AppConfig):
    st.title("Work With PURE360")
    st.caption("Join a trusted local service team. Flexible hours, fair pay, respect and support.")

    state: WorkerApplicationState = form_state("application_form", WorkerApplicationState)
    if state.submitted:
        st.success("Application received! We'll be in touch via WhatsApp.")
        return

    with st.form("application"):
        state.full_name = st.text_input("Full Name", value=state.full_name)
        state.contact_number = st.text_input("Contact Number", value=state.contact_number)
        state.area = st.text_input("Area", value=state.area)
        state.work_type = st.selectbox("Type of work", list(WORK_TYPES), format_func=WORK_TYPES.get, index=None) or ""
        state.years_experience = st.selectbox(
            "Experience (optional)", list(EXPERIENCE_OPTIONS), format_func=EXPERIENCE_OPTIONS.get, index=None
        ) or ""
        state.additional_notes = st.text_area("Anything else?", value=state.additional_notes, max_chars=500)
        uploads = {
            "cv_url": st.file_uploader("CV (optional)", type=["pdf", "doc", "docx"]),
            "id_document_url": st.file_uploader("ID document (optional)", type=["pdf", "jpg", "jpeg", "png"]),
            "photo_url": st.file_uploader("Photo (optional)", type=["jpg", "jpeg", "png"]),
        }
        sent = st.form_submit_button("Submit application", disabled=state.locked)

    if sent:
        state.documents = {
            name: (f.name, f.getvalue(), f.type) for name, f in uploads.items() if f is not None
        }
        result = submit_application(state)
        if result.success:
            st.rerun()
        elif state.errors:
            show_field_errors(state.errors)
        else:
            st.error("Something went wrong. Please try again or contact us via WhatsApp.")


# ----------------- AUTH ------------------------

def render_auth(cfg: AppConfig):
    st.title("Welcome to Pure360")
    sign_in_tab, sign_up_tab = st.tabs(["Sign in", "Create account"])

    with sign_in_tab, st.form("sign-in"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Sign in"):
            try:
                user = auth.sign_in(email, password)
            except auth.AuthFailure as e:
                st.error(str(e))
            else:
                navigate(routing.home_for_role(auth.get_user_role(user["id"])))

    with sign_up_tab:
        role = st.radio(
            "I want to",
            list(models.SIGNUP_ROLES),
            format_func=lambda r: "Book services" if r == "client" else "Work with Pure360",
            horizontal=True,
        )
        first_name = st.text_input("First name")
        last_name = st.text_input("Last name")
        email = st.text_input("Email", key="signup-email")
        password = st.text_input("Password", type="password", key="signup-password")
        if password:
            strength = auth.validate_password(password)
            st.progress(strength.strength_percent, text=f"Password strength: {strength.strength}")
        if st.button("Create account"):
            errors = auth.validate_signup(email, password, first_name, last_name, role)
            if errors:
                show_field_errors(errors)
                return
            try:
                auth.sign_up(email, password, first_name, last_name, role)
            except (auth.AuthFailure, DataAccessError) as e:
                st.error(f"Sign-up failed: {e}")
            else:
                queue_toast("Account created!")
                navigate(routing.COMPLETE_PROFILE if role == "worker" else routing.CLIENT_DASHBOARD)


# ----------------- BOOKING WIZARD ------------------------

def _send_confirmation(cfg: AppConfig, state: bf.BookingState, user) -> None:
    """Best effort: the booking is already saved, so nothing here may raise."""
    if not user.get("email"):
        return
    try:
        profile = auth.get_profile(user["id"]) or {}
    except DataAccessError as e:
        logger.warning("Profile lookup for confirmation email failed: %s", e)
        profile = {}
    result = send_booking_confirmation(
        cfg,
        to_email=user["email"],
        customer_name=f"{profile.get('first_name', '')} {profile.get('last_name', '')}".strip() or user["email"],
        service_name=state.service.name,
        date=state.date.strftime("%d %B %Y"),
        time_=state.time,
        total_price=state.total_price,
        address=profile.get("address") or "",
    )
    if not result["success"]:
        logger.warning("Confirmation email not sent: %s", result["error"])


def render_cleaning_wizard(cfg: AppConfig):
    st.title("🧽 Book a Clean")
    state: bf.BookingState = form_state("booking_wizard", bf.BookingState)
    st.progress(state.step / state.total_steps, text=f"Step {state.step} of {state.total_steps}")

    if state.step == bf.SERVICE_STEP:
        st.subheader("Choose Your Service")
        services = instant_book_services() + quote_based_services()
        ids = [s.id for s in services]
        labels = {
            s.id: f"{s.name} · {s.description}" + (" (quote)" if s.is_quote_based else "") for s in services
        }
        choice = st.radio(
            "Service",
            ids,
            format_func=labels.get,
            index=ids.index(state.service_type) if state.service_type in ids else None,
        )
        if choice:
            bf.select_service(state, choice)

    elif state.is_quote_based:
        st.subheader("Request a Quote")
        st.info(f"**{state.service.name}**: {state.service.description}")
        state.special_requirements = st.text_area(
            "Tell us about your requirements (optional)",
            value=state.special_requirements,
            placeholder="E.g., Size of space, frequency needed, specific requirements...",
        )
        st.caption("We'll respond within 2 hours.")

    elif state.step == bf.ROOMS_STEP:
        st.subheader("How Many Rooms?")
        bedrooms = st.number_input("Bedrooms", MIN_ROOMS, MAX_ROOMS, value=state.bedrooms, step=1)
        bathrooms = st.number_input("Bathrooms", MIN_ROOMS, MAX_ROOMS, value=state.bathrooms, step=1)
        bf.set_rooms(state, bedrooms, bathrooms)
        st.metric("Estimated price", format_rand(state.total_price), f"{state.hours} hours")

    elif state.step == bf.SCHEDULE_STEP:
        st.subheader("Pick a Date & Time")
        day = st.date_input(
            "Date", value=state.date, min_value=date.today())
        slot = st.selectbox(
            "Time", TIME_SLOTS, index=TIME_SLOTS.index(state.time) if state.time in TIME_SLOTS else None
        )
        bf.set_schedule(state, day, slot)
        show_field_errors(state.errors)

    else:
        st.subheader("Confirm Your Booking")
        st.markdown(bf.generate_confirmation_text(state))

    back_col, next_col = st.columns(2)
    if state.step > bf.SERVICE_STEP and back_col.button("⬅ Back", disabled=state.locked):
        bf.previous_step(state)
        st.rerun()

    if state.step < state.total_steps:
        if next_col.button("Next ➡", disabled=not bf.can_proceed(state)):
            bf.next_step(state)
            st.rerun()
    elif next_col.button(
        "Request quote" if state.is_quote_based else "Confirm booking", disabled=state.locked
    ):
        _submit_wizard(cfg, state)


def _submit_wizard(cfg: AppConfig, state: bf.BookingState) -> None:
    user = auth.current_user()
    if state.is_quote_based:
        quote = CleaningQuoteState(service_type=state.service_type, special_requirements=state.special_requirements)
        result = submit_quote(quote, user)
        done = "Quote request submitted! We'll get back to you within 2 hours."
    else:
        result = bf.submit_booking(state, user)
        done = f"Booking confirmed! Your {state.service.name} is scheduled for {state.date} at {state.time}."

    if result.error == bf.SIGN_IN_REQUIRED:
        _sign_in_redirect("Please sign in to book a service.")
    elif result.success:
        if not state.is_quote_based:
            _send_confirmation(cfg, state, user)
        reset_form("booking_wizard")
        queue_toast(done)
        navigate(routing.BOOKINGS)
    elif not result.skipped:
        st.error("Booking failed. Something went wrong. Please try again.")


# ----------------- QUOTE FORMS ------------------------

def _quote_result(state, result) -> None:
    if result.error == "sign_in_required":
        _sign_in_redirect("You need to be logged in to request a quote.")
    elif result.success:
        st.rerun()
    elif result.error == "validation":
        show_field_errors(state.errors)
    elif not result.skipped:
        st.error("Request failed. Something went wrong. Please try again.")


def render_removals(cfg: AppConfig):
    st.title("🚚 Removals")
    state: RemovalsQuoteState = form_state("removals_quote", RemovalsQuoteState)
    if state.submitted:
        st.success("Quote request sent! We'll be in touch within 24 hours.")
        if st.button("Request another quote"):
            reset_form("removals_quote")
            st.rerun()
        return

    with st.form("removals"):
        state.item_description = st.text_area("What needs to be moved?", value=state.item_description)
        state.pickup_suburb = st.text_input("Pickup suburb", value=state.pickup_suburb)
        state.dropoff_suburb = st.text_input("Drop-off suburb", value=state.dropoff_suburb)
        sent = st.form_submit_button("Request quote", disabled=state.locked)
    if sent:
        _quote_result(state, submit_quote(state, auth.current_user()))


def render_care(cfg: AppConfig):
    st.title("❤️ Care Services")
    state: CareQuoteState = form_state("care_quote", CareQuoteState)
    if state.submitted:
        st.success("Quote request sent! We'll be in touch within 24 hours.")
        if st.button("Request another quote"):
            reset_form("care_quote")
            st.rerun()
        return

    with st.form("care"):
        state.care_type = st.radio(
            "Type of care",
            list(CARE_TYPES),
            format_func=lambda k: f"{CARE_TYPES[k][0]} · {CARE_TYPES[k][1]}",
            index=None,
        ) or ""
        state.frequency = st.selectbox("How often?", FREQUENCIES, index=None) or ""
        state.special_requirements = st.text_area("Special requirements (optional)", value=state.special_requirements)
        sent = st.form_submit_button("Request quote", disabled=state.locked)
    if sent:
        _quote_result(state, submit_quote(state, auth.current_user()))


# ----------------- SIGNED-IN PAGES ------------------------

def render_bookings(cfg: AppConfig):
    st.title("📅 My Bookings")
    user = auth.current_user()
    if not user:
        st.info("Sign in to see your bookings.")
        if st.button("Sign in"):
            navigate(routing.AUTH)
        return

    try:
        bookings = cached_query(
            models.BOOKINGS, user["id"], lambda: select_rows(models.BOOKINGS, {"user_id": user["id"]})
        )
        quotes = cached_query(
            models.QUOTE_REQUESTS, user["id"], lambda: select_rows(models.QUOTE_REQUESTS, {"user_id": user["id"]})
        )
    except DataAccessError:
        st.error("Could not load your bookings. Please try again.")
        return

    if not bookings and not quotes:
        st.info("No bookings yet.")
        if st.button("Book a service"):
            navigate("/cleaning")
        return

    for b in bookings:
        st.markdown(
            f"- **{b['service_type']}** on {b['scheduled_date']} at {b['scheduled_time']} "
            f"· {format_rand(b['total_price'])} · _{b['status']}_"
        )
    if quotes:
        st.subheader("Quote requests")
        for q in quotes:
            st.markdown(f"- **{q['service_type']}** · _{q['status']}_" + (f" · {q['admin_notes']}" if q.get("admin_notes") else ""))


def render_profile(cfg: AppConfig):
    st.title("👤 Profile")
    user = auth.current_user()
    if not user:
        navigate(routing.AUTH)
        return
    profile = auth.get_profile(user["id"]) or {}
    st.write(f"**{profile.get('first_name', '')} {profile.get('last_name', '')}**")
    st.write(user.get("email") or "")
    st.write(profile.get("address") or "No address saved")
    if st.button("Sign out"):
        auth.sign_out()
        navigate(routing.HOME)


def render_client_dashboard(cfg: AppConfig):
    user = auth.current_user()
    profile = auth.get_profile(user["id"]) or {}
    st.title(f"Hi {profile.get('first_name') or 'there'} 👋")
    c1, c2 = st.columns(2)
    if c1.button("📅 My bookings", use_container_width=True):
        navigate(routing.BOOKINGS)
    if c2.button("👤 Profile", use_container_width=True):
        navigate("/profile")
    st.subheader("Book a service")
    for label, path in [("🧽 Cleaning", "/cleaning"), ("🚚 Removals", "/removals"), ("❤️ Care", "/care")]:
        if st.button(label, key=f"svc-{path}"):
            navigate(path)


def render_worker_dashboard(cfg: AppConfig):
    user = auth.current_user()
    profile = auth.get_profile(user["id"]) or {}
    st.title(f"Welcome back, {profile.get('first_name') or 'team member'}")
    st.success("Your profile is approved. New jobs in your area will appear here.")
    if profile.get("profile_picture_url"):
        st.image(profile["profile_picture_url"], width=120)
    st.write(profile.get("address") or "")


def render_pending_approval(cfg: AppConfig):
    st.title("⏳ Pending Approval")
    user = auth.current_user()
    profile = auth.get_profile(user["id"]) or {}
    status = profile.get("worker_status")

    if status == "rejected":
        st.error("Unfortunately your application was not approved. Contact us on WhatsApp for details.")
        st.link_button("💬 WhatsApp", whatsapp_link(cfg.contact.whatsapp_number, "Hello Pure360, about my worker profile."))
        return

    st.info("Thanks for completing your profile! Our team is reviewing it.")
    if st.button("Check status"):
        profile = auth.refresh_profile(user["id"]) or {}
        if profile.get("worker_status") == "approved":
            navigate(routing.WORKER_DASHBOARD)
        st.rerun()


def render_address_input(cfg: AppConfig, key: str, existing_address: str = ""):
    """Autocomplete when a maps key is available, otherwise the manual SA address form with advisory hints.

    Returns (full address, latitude, longitude).
    """
    api_key = st.session_state.get("maps_api_key")
    if api_key is None:
        api_key = addr.fetch_maps_api_key(get_supabase_client(), cfg.maps.api_key) or ""
        st.session_state.maps_api_key = api_key

    if api_key and not st.session_state.get(f"{key}-manual"):
        query = st.text_input("Where should we come?", key=f"{key}-search")
        try:
            predictions = addr.autocomplete(query, api_key)
        except addr.MapsUnavailable as e:
            logger.warning("Autocomplete failed, switching to manual entry: %s", e)
            st.session_state[f"{key}-manual"] = True
            st.rerun()
        if predictions:
            choice = st.selectbox(
                "Select your address",
                [p["place_id"] for p in predictions],
                format_func={p["place_id"]: p["description"] for p in predictions}.get,
                key=f"{key}-choice",
            )
            try:
                place = addr.place_details(choice, api_key)
            except addr.MapsUnavailable as e:
                logger.warning("Place details failed: %s", e)
            else:
                unit = st.text_input("Unit / Flat number", key=f"{key}-unit")
                parts = {
                    "unit": unit,
                    "street": place.street,
                    "suburb": place.suburb or place.city,
                    "city": place.city,
                    "province": place.province,
                    "postal_code": place.postal_code,
                }
                for msg in addr.validate_sa_address(parts).values():
                    st.caption(f"⚠️ {msg}")
                return addr.build_full_address(parts), place.latitude, place.longitude
        if st.button("Can't find it? Enter manually", key=f"{key}-to-manual"):
            st.session_state[f"{key}-manual"] = True
            st.rerun()
        return "", None, None

    existing = addr.parse_existing_address(existing_address) if existing_address else {}
    fields = {
        "unit": st.text_input("Unit / Flat number", key=f"{key}-unit-manual"),
        "complex": st.text_input("Complex / Building (optional)", key=f"{key}-complex"),
        "street": st.text_input("Street address", value=existing.get("street", ""), key=f"{key}-street"),
        "suburb": st.text_input("Suburb", value=existing.get("suburb", ""), key=f"{key}-suburb"),
        "city": st.text_input("City", value=existing.get("city", ""), key=f"{key}-city"),
        "province": st.selectbox(
            "Province",
            addr.SA_PROVINCES,
            index=addr.SA_PROVINCES.index(existing["province"]) if existing.get("province") in addr.SA_PROVINCES else None,
            key=f"{key}-province",
        ),
        "postal_code": addr.clean_postal_code(
            st.text_input("Postal code", value=existing.get("postal_code", ""), max_chars=4, key=f"{key}-postal")
        ),
    }
    if not fields["street"].strip():
        return "", None, None
    hints = addr.validate_manual_address(fields["street"]).hints + list(addr.validate_sa_address(fields).values())
    for hint in hints:
        st.caption(f"⚠️ {hint}")
    return addr.build_full_address(fields), None, None


def render_complete_profile(cfg: AppConfig):
    st.title("Complete Your Profile")
    user = auth.current_user()
    profile = auth.get_profile(user["id"])
    state = form_state("complete_profile", lambda: from_profile(profile))

    state.first_name = st.text_input("First name", value=state.first_name)
    state.last_name = st.text_input("Last name", value=state.last_name)
    full_address, lat, lng = render_address_input(cfg, "worker-address", (profile or {}).get("address") or "")
    if full_address:
        state.address, state.latitude, state.longitude = full_address, lat, lng
    picture = st.file_uploader("Profile picture", type=["jpg", "jpeg", "png"])
    if picture is not None:
        state.picture_name, state.picture_bytes, state.picture_type = picture.name, picture.getvalue(), picture.type

    if st.button("Complete profile", disabled=state.locked):
        result = complete_profile(state, user["id"])
        if result.success:
            auth.refresh_profile(user["id"])
            reset_form("complete_profile")
            queue_toast("Profile completed! Your profile is now pending approval.")
            navigate(routing.PENDING_APPROVAL)
        elif state.errors:
            show_field_errors(state.errors)
        elif not result.skipped:
            st.error("Failed to update profile. Please try again.")


def render_not_found(cfg: AppConfig):
    st.title("404")
    st.write("Oops! Page not found.")
    if st.button("Return to Home"):
        navigate(routing.HOME)
