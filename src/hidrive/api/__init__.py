"""HiDrive REST resources and the request/response pipeline they share."""
