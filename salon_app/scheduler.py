from apscheduler.schedulers.background import BackgroundScheduler
import atexit
from datetime import timedelta
from .extensions import get_storage
from .models import utc_now

scheduler = BackgroundScheduler()


def expire_stale_pending_bookings(app):
    """Cancel bookings that have been pending longer than PENDING_BOOKING_TTL_HOURS."""
    with app.app_context():
        ttl = timedelta(hours=app.config["PENDING_BOOKING_TTL_HOURS"])
        storage = get_storage()
        try:
            count = storage.expire_stale_pending_bookings(utc_now() - ttl)
        except Exception as e:
            storage.session.rollback()
            app.logger.error(f"[SCHEDULER] Error expiring pending bookings: {e}")
            return 0

        if count:
            app.logger.info(f"[SCHEDULER] Cancelled {count} stale pending booking(s)")
        else:
            app.logger.debug("[SCHEDULER] No stale pending bookings")
        return count


def shutdown_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)


def init_scheduler(app):
    """Start the stale-booking job when EXPIRE_STALE_PENDING_BOOKINGS is on."""
    if not app.config.get("EXPIRE_STALE_PENDING_BOOKINGS"):
        return False

    scheduler.add_job(
        expire_stale_pending_bookings,
        "interval",
        minutes=app.config["SCHEDULER_INTERVAL_MINUTES"],
        args=[app],
        id="expire_stale_pending_bookings",
        replace_existing=True,
    )

    if not scheduler.running:
        scheduler.start()
        app.logger.info("[SCHEDULER] Scheduler started")
        # Shut down the scheduler when exiting the app
        atexit.register(shutdown_scheduler)
    else:
        app.logger.info("[SCHEDULER] Scheduler already running (job replaced)")
    return True
