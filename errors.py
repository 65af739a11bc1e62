class HotelAdminError(Exception):
    """Base class for errors the admin API reports to the caller"""
    status_code = 400


class NotFoundError(HotelAdminError):
    status_code = 404


class ValidationError(HotelAdminError):
    status_code = 400


class InvalidTransition(HotelAdminError):
    status_code = 409


class InsufficientRooms(HotelAdminError):
    status_code = 409


class UnknownRoomType(HotelAdminError):
    status_code = 409


class MissingOwnerError(HotelAdminError):
    status_code = 401
