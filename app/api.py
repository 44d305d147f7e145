"""API Blueprint - Stylist sessions, styling runs and look refinement."""

import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from backend.services import image_data
from backend.services.errors import (
    InvalidImageError,
    InvalidInstructionError,
    InvalidStateError,
    OutfitNotFoundError,
)
from backend.services.stylist_session import SessionRegistry, StylistSession
from models.api_payload import EditRequest, ItemUploadRequest

api_bp = Blueprint('api', __name__)

STYLING_FAILED_MESSAGE = "Something went wrong with the AI stylist. Please try again."
EDIT_FAILED_MESSAGE = "Failed to edit image. Please try again."


def _registry() -> SessionRegistry:
    return current_app.extensions['stylist']['sessions']


def _run(coro):
    return current_app.extensions['stylist']['loop'].run(coro)


def _snapshot(session: StylistSession, status: int = 200):
    return jsonify(session.snapshot().model_dump(mode='json')), status


def _not_found():
    return jsonify({'error': 'Session not found'}), 404


def _validation_error(exc: ValidationError):
    details = exc.errors(include_url=False, include_context=False, include_input=False)
    return jsonify({'error': 'Validation error', 'details': details}), 400


@api_bp.route('/session', methods=['POST'])
def create_session():
    """
    Create a new stylist session.

    Returns:
        201: Session snapshot (phase "idle")
    """
    session = _registry().create()
    logging.info(f"[API] Session created: {session.session_id}")
    return _snapshot(session, 201)


@api_bp.route('/session/<session_id>', methods=['GET'])
def get_session(session_id: str):
    """
    Current session state; polled by the frontend for the progress label.

    Returns:
        200: Session snapshot
        404: Session not found
    """
    session = _registry().get(session_id)
    if session is None:
        return _not_found()
    return _snapshot(session)


@api_bp.route('/session/<session_id>', methods=['DELETE'])
def delete_session(session_id: str):
    if not _registry().remove(session_id):
        return _not_found()
    return '', 204


@api_bp.route('/session/<session_id>/item', methods=['POST'])
def upload_item(session_id: str):
    """
    Upload the clothing item. Replaces any previous item and its results.

    Body (either):
        - multipart form with file field ``image``
        - JSON ``{"image": "data:<mime>;base64,<payload>"}``

    Returns:
        200: Session snapshot (phase "item_selected")
        400: Not an image
        404: Session not found
    """
    session = _registry().get(session_id)
    if session is None:
        return _not_found()

    try:
        upload = request.files.get('image')
        if upload is not None:
            image = image_data.from_upload(upload.read())
        else:
            image = ItemUploadRequest.model_validate(request.get_json(silent=True) or {}).image
        session.upload(image)
    except ValidationError as e:
        return _validation_error(e)
    except InvalidImageError as e:
        logging.warning(f"[API] Rejected upload for {session_id}: {e}")
        return jsonify({'error': 'Invalid image', 'message': str(e)}), 400

    return _snapshot(session)


@api_bp.route('/session/<session_id>/reset', methods=['POST'])
def reset_session(session_id: str):
    """Start over: drop item, analysis and looks."""
    session = _registry().get(session_id)
    if session is None:
        return _not_found()
    session.reset()
    return _snapshot(session)


@api_bp.route('/session/<session_id>/style', methods=['POST'])
def style_item(session_id: str):
    """
    Analyze the item and generate one look per suggestion.

    Blocks until the run finishes; progress is visible via GET /session/<id>.

    Returns:
        200: Session snapshot (phase "styled")
        400: No item uploaded
        409: Run already in flight, or item already styled
        502: Remote analysis or generation failed
    """
    session = _registry().get(session_id)
    if session is None:
        return _not_found()
    if session.image is None:
        return jsonify({'error': 'No item uploaded'}), 400

    try:
        _run(session.style())
    except InvalidStateError as e:
        return jsonify({'error': 'Conflict', 'message': str(e)}), 409
    except Exception as e:
        logging.error(f"[API] Styling failed for {session_id}: {e}", exc_info=True)
        return jsonify({'error': 'Styling failed', 'message': STYLING_FAILED_MESSAGE}), 502

    return _snapshot(session)


@api_bp.route('/session/<session_id>/outfits/<int:index>/edit', methods=['POST'])
def edit_outfit(session_id: str, index: int):
    """
    Refine one look with a free-text instruction.

    Body:
        - instruction: str (required, not blank)

    Returns:
        200: Session snapshot with the updated look
        400: Blank instruction
        404: Session or look not found
        409: This look is already being refined
        502: Remote edit failed; the previous image is kept
    """
    session = _registry().get(session_id)
    if session is None:
        return _not_found()

    try:
        payload = EditRequest.model_validate(request.get_json(silent=True) or {})
        _run(session.edit(index, payload.instruction))
    except ValidationError as e:
        return _validation_error(e)
    except InvalidInstructionError as e:
        return jsonify({'error': 'Invalid instruction', 'message': str(e)}), 400
    except OutfitNotFoundError as e:
        return jsonify({'error': 'Look not found', 'message': str(e)}), 404
    except InvalidStateError as e:
        return jsonify({'error': 'Conflict', 'message': str(e)}), 409
    except Exception as e:
        logging.error(f"[API] Edit of look {index} failed for {session_id}: {e}", exc_info=True)
        return jsonify({'error': 'Edit failed', 'message': EDIT_FAILED_MESSAGE}), 502

    return _snapshot(session)
