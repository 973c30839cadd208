"""
Infantino - Restaurant reviews companion

CLI entry point: restaurant info, review listing, review submission and export.
"""

import argparse
import asyncio
import logging
import sys

import config.settings as settings
from src.reports.review_report import ReviewReport
from src.storage.review_store import ReviewStore, StorageError
from src.workflows.review_editor import EditorField, ReviewEditorWorkflow, SubmitResult
from src.workflows.review_list import ReviewListWorkflow
from src.utils import messages


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f"{settings.RESTAURANT_NAME} - recensioni",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show opening hours and phone
  python main.py info

  # Write a review
  python main.py add --rating 5 --title "Ottimo pranzo" \\
                 --place "Locale accogliente nel cuore della città." \\
                 --experience "Servizio impeccabile e piatti deliziosi."

  # List reviews, newest first
  python main.py list
        """
    )

    parser.add_argument(
        "--store",
        default=str(settings.STORE_PATH),
        help=f"Review store file (default: {settings.STORE_PATH})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("info", help="Show restaurant information")
    subparsers.add_parser("list", help="List reviews, newest first")

    add = subparsers.add_parser("add", help="Write a new review")
    add.add_argument("--rating", type=int, required=True, help="Stars, 1-5")
    add.add_argument("--title", required=True)
    add.add_argument("--place", required=True, help="Description of the place")
    add.add_argument("--experience", required=True)
    add.add_argument("--user", default=settings.DEFAULT_USER_NAME, help="Display name")

    delete = subparsers.add_parser("delete", help="Delete a review by id")
    delete.add_argument("review_id")

    export = subparsers.add_parser("export", help="Export reviews to CSV")
    export.add_argument(
        "--output",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )

    return parser


def show_info(reviews: ReviewListWorkflow) -> int:
    restaurant = reviews.restaurant
    print(restaurant.name)
    print(restaurant.description)
    print(f"Telefono: {restaurant.phone_display}")
    print("Orari:")
    for hour in restaurant.opening_hours:
        print(f"  {reviews.weekday_name(hour.weekday):<10} {hour.opening_time} – {hour.closing_time}")
    return 0


def show_reviews(reviews: ReviewListWorkflow) -> int:
    reviews.refresh()

    if reviews.error_message:
        print(reviews.error_message)
        return 1

    if reviews.is_empty:
        print(messages.REVIEWS_EMPTY_STATE)
        return 0

    for item in reviews.reviews:
        stars = "★" * item.rating + "☆" * (5 - item.rating)
        print(f"{stars}  {item.title}  ({item.user_name}, {item.formatted_date})")
        print(f"  {item.place_description}")
        print(f"  {item.experience}")
        print(f"  id: {item.id}")
    return 0


def add_review(store: ReviewStore, args: argparse.Namespace) -> int:
    editor = ReviewEditorWorkflow(store, user_name_provider=lambda: args.user)

    editor.set_rating(args.rating)
    editor.set_field(EditorField.TITLE, args.title)
    editor.set_field(EditorField.PLACE_DESCRIPTION, args.place)
    editor.set_field(EditorField.EXPERIENCE, args.experience)

    if editor.truncated_field:
        print(f"Nota: {editor.truncated_field.value} troncato alla lunghezza massima.")

    outcome = asyncio.run(editor.submit())

    if outcome.result is SubmitResult.SUCCESS:
        print(editor.submit_state.message)
        return 0

    if outcome.result is SubmitResult.VALIDATION_FAILED:
        print(f"{outcome.field.value}: {editor.error_for(outcome.field)}")
    else:
        print(editor.submit_state.message)
    return 1


def delete_review(reviews: ReviewListWorkflow, review_id: str) -> int:
    if reviews.delete_review(review_id):
        print(f"Recensione {review_id} eliminata.")
        return 0

    print(reviews.error_message or f"Recensione {review_id} non trovata.")
    return 1


def export_reviews(store: ReviewStore, output_dir: str) -> int:
    report = ReviewReport(store)
    output_path = report.export_csv(output_dir)
    summary = report.rating_summary()

    print(f"Recensioni: {summary['total_reviews']}")
    if summary["average_rating"] is not None:
        print(f"Valutazione media: {summary['average_rating']}")
    print(f"CSV: {output_path}")
    return 0


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    store = ReviewStore.open(args.store)
    reviews = ReviewListWorkflow(store)

    try:
        if args.command == "info":
            exit_code = show_info(reviews)
        elif args.command == "list":
            exit_code = show_reviews(reviews)
        elif args.command == "add":
            exit_code = add_review(store, args)
        elif args.command == "delete":
            exit_code = delete_review(reviews, args.review_id)
        else:
            exit_code = export_reviews(store, args.output)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(1)

    except StorageError as e:
        logger.error(f"Review store unavailable: {e}", exc_info=True)
        print(f"\nArchivio recensioni non disponibile: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
