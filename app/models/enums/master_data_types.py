# app/models/enums/master_data_types.py
import enum


class CategoryType(str, enum.Enum):
    service = "service"
    expense = "expense"
    general = "general"


class TruckType(str, enum.Enum):
    forward = "forward"
    closed_van = "closed_van"
    wingvan = "wingvan"
    flatbed = "flatbed"
    reefer = "reefer"
    tanker = "tanker"
    dump_truck = "dump_truck"
    other = "other"
