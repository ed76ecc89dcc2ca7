# app/constants/seed_data.py

SAMPLE_CLIENT = {
    "client_code": "CLI001",
    "client_name": "Sample Corporation",
    "contact_person": "John Doe",
    "email": "john.doe@sample.com",
    "phone": "+63 912 345 6789",
    "address": "123 Business St, Makati City, Metro Manila",
    "payment_terms": "Net 30 Days",
    "credit_limit": 1000000,
}

# (category_name, category_type, description, display_order)
DEFAULT_CATEGORIES = [
    # service
    ("Import Services", "service", "Import-related logistics services", 1),
    ("Export Services", "service", "Export-related logistics services", 2),
    ("Domestic Services", "service", "Domestic freight and forwarding", 3),
    ("Warehousing", "service", "Storage and warehousing services", 4),
    ("Customs Brokerage", "service", "Customs clearance services", 5),
    ("Transportation", "service", "Trucking and delivery services", 6),
    # expense
    ("Receipted Expenses", "expense", "Expenses with official receipts", 1),
    ("Non-Receipted Expenses", "expense", "Expenses without receipts", 2),
    ("Port Charges", "expense", "Port handling and terminal fees", 3),
    ("Documentation Fees", "expense", "Document processing fees", 4),
    ("Handling Charges", "expense", "Cargo handling charges", 5),
    # general
    ("Standard", "general", "Standard category", 1),
    ("Premium", "general", "Premium category", 2),
    ("Express", "general", "Express service category", 3),
]

# (size_name, size_code, teu_equivalent, length_ft, width_ft, height_ft,
#  max_weight_kg, description, display_order)
DEFAULT_CONTAINER_SIZES = [
    ("20 Footer (Standard)", "20FT", 1.0, 20, 8, 8.5, 28000, "Standard 20-foot container", 1),
    ("20 Footer (High Cube)", "20HC", 1.0, 20, 8, 9.5, 28000, "20-foot high cube container", 2),
    ("40 Footer (Standard)", "40FT", 2.0, 40, 8, 8.5, 30480, "Standard 40-foot container", 3),
    ("40 Footer (High Cube)", "40HC", 2.0, 40, 8, 9.5, 30480, "40-foot high cube container", 4),
    ("45 Footer (High Cube)", "45HC", 2.25, 45, 8, 9.5, 30480, "45-foot high cube container", 5),
    ("20 Footer (Reefer)", "20RF", 1.0, 20, 8, 8.5, 27400, "20-foot refrigerated container", 6),
    ("40 Footer (Reefer)", "40RF", 2.0, 40, 8, 8.5, 29500, "40-foot refrigerated container", 7),
    ("20 Footer (Open Top)", "20OT", 1.0, 20, 8, 8.5, 28000, "20-foot open top container", 8),
    ("40 Footer (Open Top)", "40OT", 2.0, 40, 8, 8.5, 30480, "40-foot open top container", 9),
    ("20 Footer (Flat Rack)", "20FR", 1.0, 20, 8, 8.5, 28000, "20-foot flat rack container", 10),
    ("40 Footer (Flat Rack)", "40FR", 2.0, 40, 8, 8.5, 30480, "40-foot flat rack container", 11),
]

# (size_name, size_code, truck_type, capacity_tons, length_ft, width_ft,
#  height_ft, description, display_order)
DEFAULT_TRUCK_SIZES = [
    ("4W Forward", "4WF", "forward", 1.5, 10, 5, 5, "4-wheeler forward truck", 1),
    ("6W Forward", "6WF", "forward", 3.0, 16, 6, 6, "6-wheeler forward truck", 2),
    ("6W Closed Van", "6WCV", "closed_van", 3.0, 16, 6, 7, "6-wheeler closed van", 3),
    ("10W Forward", "10WF", "forward", 8.0, 20, 7, 7, "10-wheeler forward truck", 4),
    ("10W Closed Van", "10WCV", "closed_van", 8.0, 20, 7, 8, "10-wheeler closed van", 5),
    ("10W Wingvan", "10WWV", "wingvan", 8.0, 20, 7, 8, "10-wheeler wing van", 6),
    ("12W Closed Van", "12WCV", "closed_van", 12.0, 24, 8, 8, "12-wheeler closed van", 7),
    ("12W Wingvan", "12WWV", "wingvan", 12.0, 24, 8, 8, "12-wheeler wing van", 8),
    ("20 Footer Chassis", "20FCH", "flatbed", 20.0, 20, 8, 3, "20-foot container chassis", 9),
    ("40 Footer Chassis", "40FCH", "flatbed", 30.0, 40, 8, 3, "40-foot container chassis", 10),
    ("Reefer Truck (10W)", "10WR", "reefer", 8.0, 20, 7, 8, "10-wheeler refrigerated truck", 11),
    ("Reefer Truck (12W)", "12WR", "reefer", 12.0, 24, 8, 8, "12-wheeler refrigerated truck", 12),
    ("Dump Truck (6W)", "6WD", "dump_truck", 5.0, 16, 6, 5, "6-wheeler dump truck", 13),
    ("Dump Truck (10W)", "10WD", "dump_truck", 10.0, 20, 7, 6, "10-wheeler dump truck", 14),
]
