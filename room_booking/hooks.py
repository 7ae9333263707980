app_name = "room_booking"
app_title = "Room Booking"
app_publisher = "Sebastian Ortiz Valencia"
app_description = "Reserva de salas de reuniones por usuario o codigo de departamento"
app_email = "sebastianortiz989@gmail.com"
app_license = "mit"

# Apps
# ------------------

# required_apps = []

# Includes in <head>
# ------------------

# include js, css files in header of desk.html
# app_include_css = "/assets/room_booking/css/room_booking.css"
# app_include_js = "/assets/room_booking/js/room_booking.js"

# Installation
# ------------

after_install = "room_booking.install.after_install"

# Uninstallation
# ------------

# before_uninstall = "room_booking.uninstall.before_uninstall"

# Permissions
# -----------
# Permissions evaluated in scripted ways

# permission_query_conditions = {
# 	"Room Reservation": "room_booking.permissions.get_permission_query_conditions",
# }

# Document Events
# ---------------
# Hook on document methods and events

# doc_events = {
# 	"Meeting Room": {
# 		"on_update": "method",
# 	}
# }

# Scheduled Tasks
# ---------------
# Las reservas no expiran: no hay tareas programadas.

# Testing
# -------

before_tests = "room_booking.install.before_tests"

# User Data Protection
# --------------------

user_data_fields = [
	{
		"doctype": "Room Reservation",
		"filter_by": "booked_by",
		"redact_fields": ["contact_name", "contact_email", "contact_phone"],
		"partial": 1,
	},
]

# Automatically update python controller files with type annotations for this app.
# export_python_type_annotations = True
