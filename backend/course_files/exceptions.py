from rest_framework import status
from rest_framework.exceptions import APIException


class Unauthorized(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You are not allowed to perform this action.'
    default_code = 'unauthorized'


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'A course file already exists for this subject, faculty and class.'
    default_code = 'conflict'


class InvalidState(APIException):
    """The task is not in a state that allows the requested transition."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Task is not in a valid state for this action.'
    default_code = 'invalid_state'
