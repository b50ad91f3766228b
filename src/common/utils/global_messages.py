class GlobalMessages:
    # Generic
    INTERNAL_ERROR = "Error interno del servidor"
    ROUTE_NOT_FOUND = "Ruta no encontrada"
    INVALID_DATA = "Datos inválidos"
    DATE_RANGE_REQUIRED = "Fecha inicio y fin son requeridas"
    INVALID_DATE_RANGE = "La fecha de inicio no puede ser posterior a la fecha fin"

    # Auth Messages
    CREDENTIALS_REQUIRED = "Email y contraseña son requeridos"
    INVALID_CREDENTIALS = "Credenciales incorrectas"
    LOGIN_SUCCESS = "Login exitoso"
    USER_ALREADY_EXISTS = "El usuario ya existe"
    USER_CREATED = "Usuario creado exitosamente"
    USER_NOT_FOUND = "Usuario no encontrado"
    AUTH_REQUIRED = "Autenticación requerida"
    SESSION_INVALID = "Sesión inválida o expirada"

    # Patient Messages
    PATIENT_NOT_FOUND = "Paciente no encontrado"
    PATIENT_CREATED = "Paciente creado exitosamente"
    PATIENT_UPDATED = "Paciente actualizado exitosamente"
    PATIENT_DELETED = "Paciente eliminado exitosamente"
    PATIENT_DUPLICATE_IDENTIFICATION = "Ya existe un paciente con esta identificación"
    PATIENT_HAS_APPOINTMENTS = "No se puede eliminar el paciente porque tiene citas asociadas"

    # Appointment Messages
    APPOINTMENT_NOT_FOUND = "Cita no encontrada"
    APPOINTMENT_CREATED = "Cita creada exitosamente"
    APPOINTMENT_UPDATED = "Cita actualizada exitosamente"
    APPOINTMENT_DELETED = "Cita eliminada exitosamente"
    APPOINTMENT_INVALID_TRANSITION = "No se puede cambiar el estado de la cita de '{current}' a '{target}'"
    APPOINTMENT_NOT_COMPLETED = "Solo se pueden convertir citas completadas en procedimientos"
    APPOINTMENT_ALREADY_CONVERTED = "La cita ya fue convertida en un procedimiento"
    CONVERSION_FIELDS_REQUIRED = "Descripción, costo y forma de pago son requeridos"
    ORTHODONTICS_REGISTERED = "Tratamiento de ortodoncia registrado exitosamente"
    PROCEDURE_REGISTERED = "Procedimiento registrado exitosamente"

    # Procedure Messages
    PROCEDURE_NOT_FOUND = "Procedimiento no encontrado"
    PROCEDURE_CREATED = "Procedimiento creado exitosamente"
    PROCEDURE_UPDATED = "Procedimiento actualizado exitosamente"
    PROCEDURE_DELETED = "Procedimiento eliminado exitosamente"
    PROCEDURE_APPOINTMENT_OTHER_PATIENT = "La cita pertenece a otro paciente"
    PROCEDURE_FLAG_FROM_APPOINTMENT = "El tipo de ortodoncia lo define la cita de origen"

    # Bill Messages
    BILL_NOT_FOUND = "Gasto no encontrado"
    BILL_CREATED = "Gasto creado exitosamente"
    BILL_UPDATED = "Gasto actualizado exitosamente"
    BILL_DELETED = "Gasto eliminado exitosamente"

    # Monthly Closing Messages
    CLOSING_NOT_FOUND = "Cierre no encontrado"
    CLOSING_CREATED = "Cierre mensual creado exitosamente"
    CLOSING_ALREADY_EXISTS = "Ya existe un cierre para este mes y año"
