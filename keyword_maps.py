"""
Keyword Dictionaries
Label synonyms (English, German, French, Spanish) and lookup tables shared by
every locator and normalizer.

Each entry is an ordered tuple: earlier labels win over later ones, so more
specific labels are listed before the generic ones they contain.
"""

from types import MappingProxyType


KEYWORD_MAP = MappingProxyType({
    "contract": (
        "Contract No", "Contract Number", "Order No", "PO No", "Purchase Order",
        "Vertrag Nr", "Vertragsnummer", "Contrat N", "Pedido N", "Contract",
        "Bestellnummer", "Bestellung Nr", "Agreement No", "Agreement Number",
        "Scheduling Agreement", "Contract Identification", "P.O. Number", "P.O. No",
        "Order Number", "Document Number", "Ponum", "Order Id",
    ),
    "part": (
        "Part No", "Part Number", "Item Code", "Material No", "P/N", "Sachnummer",
        "Teilenummer", "Ref", "Reference", "Item", "Artikelnummer", "Código de pieza",
        "Part #", "Material", "Item Number", "Material Number", "Our Part No",
        "Your Part No", "Material Id", "Part Id",
    ),
    "date": (
        "Issue Date", "Date", "Dated", "Datum", "Fecha", "Date d'émission",
        "Erstelldatum", "Effective Date", "Agreement Date", "Entered into", "Made on",
        "Executed on", "Signed on", "As of", "Date of Issue", "Order Date",
        "Creation Date",
    ),
    "amendment": (
        "Amendment Number", "Amendment No", "Amendment #", "Amdt. No.", "Amendment",
        "Amnd", "Amdt", "Revision Level", "Revision", "Rev", "Änderung", "Versión",
        "Change Level", "Version",
    ),
    "buyer": (
        "BUYER NAME AND ADDRESS", "Buyer Name and Address", "BUYER NAME", "Buyer Name",
        "Buyer Address", "Buyer", "Purchaser", "Käufer", "Acheteur", "Comprador",
        "Bill To", "Sold To", "Customer", "Invoice Address", "Bill-To Address",
        "Issued To",
    ),
    "seller": (
        "SELLER NAME AND ADDRESS", "Seller Name and Address", "SELLER NAME",
        "Seller Name", "Seller", "Vendor Address", "Supplier Address", "Vendor Name",
        "Supplier Name", "Vendor", "Supplier", "Contractor", "Verkäufer", "Lieferant",
        "Fournisseur", "Proveedor",
    ),
    "program": (
        "Program Name", "Program Description", "Program", "Vehicle Line", "Vehicle",
        "Platform", "Model", "Project", "Application", "Usage",
    ),
    "duns": (
        "DUNS", "D-U-N-S", "Dun & Bradstreet", "Duns No", "Duns Number", "DUNS Code",
        "Vendor Code", "Supplier Code", "Supplier No", "Vendor No",
    ),
    "manager": (
        "Account Manager", "Key Account Manager", "Account Mgr", "Purchasing Contact",
        "Contract Owner", "Sales Contact", "Sales Rep", "Representative", "Salesperson",
        "Program Manager", "Commercial Contact", "Seller Contact", "Supplier contact",
        "Contact Person", "Prepared By", "Buyer Contact", "Account Administrator",
        "Administrator", "Creator", "Author", "Sales Engineer", "Inside Sales",
        "Customer Service", "Contact Name", "Submitted By", "Owner",
    ),
    "price": (
        "Base Price", "Unit Price", "Piece Price", "Net Price", "Unit Cost", "P/U",
        "Price", "Cost", "Rate", "Amount",
    ),
    "totalPrice": (
        "Total Price", "Total Amount", "Total Order Value", "Total Cost",
        "Extended Price", "Grand Total", "Total Value", "Net Value", "Order Total",
        "Total",
    ),
    "rawCert": (
        "Raw Material Cert. Analysis", "Raw Material Certification", "Material Cert",
        "Cert. Analysis", "Certification", "Material Specification",
    ),
    "annualCert": (
        "Raw Material Annual Cert.", "Annual Certification", "Annual Cert",
        "Recertification",
    ),
    "lessFinish": (
        "Less Finish Part Number", "Less Finish P/N", "Less Finish Part No", "LFPN",
        "Base Part Number", "Raw Part Number",
    ),
    "location": (
        "Manufacturing Location", "Mfg Location", "Plant Location", "Ship From Address",
        "Ship From", "Ship-From", "Place of Manufacture", "Vendor Location",
        "Shipping Point", "Origin", "Location", "Plant", "Factory", "Site",
    ),
    "shipFromDuns": (
        "Ship From DUNS", "Ship-From DUNS", "Supplier DUNS", "Mfg DUNS",
        "Manufacturing DUNS", "Vendor DUNS", "Origin DUNS",
    ),
    "deliveryDuns": (
        "Delivery DUNS", "Ship To DUNS", "Receiving DUNS", "Destination DUNS",
    ),
    "paymentTerms": (
        "Payment Terms", "Terms of Payment", "Pay Terms", "Zahlungsbedingungen",
        "Conditions de paiement", "Condiciones de pago", "Payment", "Terms",
    ),
    "freightTerms": (
        "Freight Terms", "Incoterms", "Incoterm", "Shipping Terms", "Trade Terms",
        "Lieferbedingungen",
    ),
    "deliveryTerms": ("Delivery Terms",),
    "currency": ("Currency Code", "Currency", "Curr", "Währung", "Devise", "Divisa", "Moneda"),
    "mailingAddress": (
        "Mailing Address Information", "Mailing Address", "Mail To",
        "Correspondence Address", "Postal Address", "Send Notices To", "Notices To",
        "Bill To Address", "Invoicing Address",
    ),
    "purchasingContact": (
        "Purchasing Contact", "Buyer Contact", "Purchasing Agent", "Buyer Name",
        "Authorized By", "Confirmed By", "Contact", "Buyer",
    ),
    "drawingNumber": (
        "Drawing Number", "Drawing No", "Drwg No", "Drawing", "Blueprint", "dwg",
        "Engineering Level",
    ),
    "reasonForIssuing": (
        "Reason for Issuing Contract/Amendment", "Reason for Issuing Contract / Amendment",
        "Reason for Issuing", "Description of Change", "Change Description", "Reason",
        "Purpose", "Comments", "Remarks", "Notes",
    ),
    "receivingPlants": (
        "Receiving Plants", "Destination Plant", "Receiving Location", "Delivery Address",
        "Final Destination", "Ship To", "Ship-To", "Plant Code", "Dock Code",
    ),
    "shippingTo": ("Shipping To", "Ship To"),
    "hazardous": (
        "Hazardous Material Indicator", "Hazardous Material", "HazMat", "Dangerous Goods",
    ),
    "partDescription": ("Part Description", "Teilebeschreibung", "Designacion", "Description"),
    "unitOfMeasure": ("Unit of Measure", "UOM"),
    "dailyCapacity": ("Daily Capacity",),
    "hoursPerDay": ("Hours Per Day",),
    "containerType": ("Container Type",),
    "sampleRequiredBy": ("Sample Required By",),
    "buyerCode": ("Buyer Code",),
})

# Month names (English, German, Spanish) -> two-digit month, longest forms first
MONTH_NAMES = (
    ("septiembre", "09"), ("noviembre", "11"), ("diciembre", "12"),
    ("september", "09"), ("november", "11"), ("december", "12"), ("dezember", "12"),
    ("february", "02"), ("febrero", "02"), ("oktober", "10"), ("octubre", "10"),
    ("january", "01"), ("october", "10"), ("februar", "02"), ("august", "08"),
    ("januar", "01"), ("agosto", "08"), ("march", "03"), ("april", "04"),
    ("marzo", "03"), ("abril", "04"), ("enero", "01"), ("junio", "06"),
    ("julio", "07"), ("maerz", "03"), ("june", "06"),
    ("july", "07"), ("juni", "06"), ("juli", "07"), ("mayo", "05"),
    ("märz", "03"), ("sept", "09"), ("jan", "01"), ("feb", "02"), ("mar", "03"),
    ("mär", "03"), ("apr", "04"), ("abr", "04"), ("may", "05"), ("mai", "05"),
    ("jun", "06"), ("jul", "07"), ("aug", "08"), ("ago", "08"), ("sep", "09"),
    ("oct", "10"), ("okt", "10"), ("nov", "11"), ("dec", "12"), ("dez", "12"),
    ("dic", "12"), ("ene", "01"),
)

# City / country spellings -> canonical English country name
COUNTRY_LOOKUP = MappingProxyType({
    "UNITED STATES": "United States",
    "U.S.A.": "United States",
    "USA": "United States",
    "AMERICA": "United States",
    "MEXICO": "Mexico",
    "MÉXICO": "Mexico",
    "CHINA": "China",
    "GERMANY": "Germany",
    "DEUTSCHLAND": "Germany",
    "FRANCE": "France",
    "CANADA": "Canada",
    "SPAIN": "Spain",
    "ESPAÑA": "Spain",
    "ITALY": "Italy",
    "JAPAN": "Japan",
    "KOREA": "Korea",
    "INDIA": "India",
    "BRAZIL": "Brazil",
    "UNITED KINGDOM": "United Kingdom",
    "UK": "United Kingdom",
    "ENGLAND": "United Kingdom",
    "CZECH": "Czech Republic",
    "POLAND": "Poland",
    "HUNGARY": "Hungary",
    "ROMANIA": "Romania",
    "SOUTH AFRICA": "South Africa",
    "SLOVAKIA": "Slovakia",
    "PORTUGAL": "Portugal",
    "TURKEY": "Turkey",
    "MÜNCHEN": "Germany",
    "MUNICH": "Germany",
    "SALONTA": "Romania",
    "DETROIT": "United States",
    "TROY": "United States",
    "JUAREZ": "Mexico",
    "MATAMOROS": "Mexico",
    "PUEBLA": "Mexico",
    "SHANGHAI": "China",
    "RYTON": "United Kingdom",
    "BIRMINGHAM": "United Kingdom",
    "VIGO": "Spain",
    "RENNES": "France",
})

# Contract/order vocabulary that signals a non-English document
FOREIGN_MARKERS = (
    "vertrag", "bestellung", "auftrag", "contrat", "commande", "pedido", "orden",
    "prix", "fecha", "designacion", "vigencia", "d'application", "ancien", "netto",
    "合同", "协议", "采购", "订单",
    "契約", "注文",
    "соглашение", "договор",
)

# Fields whose values the enrichment step is asked to translate
TRANSLATABLE_FIELDS = (
    "partDescription", "paymentTerms", "freightTerms", "deliveryTerms",
    "manufacturingLocation", "shippingTo", "programName", "lbe", "clientName",
    "buyerNameAndAddress", "sellerNameAndAddress", "reasonForIssuing",
)

# Fields requested from the enrichment service
ENRICHMENT_FIELDS = (
    "contractNumber", "amendmentNumber", "buyerNameAndAddress", "sellerNameAndAddress",
    "clientName", "partNumber", "partDescription", "issueDate", "currency", "totalPrice",
    "paymentTerms", "manufacturingLocation", "shippingTo", "freightTerms",
    "accountManager", "programName", "lbe", "language",
)

# Block capture stops at a line starting with one of these headers
SECTION_STOP_PREFIXES = (
    "phone", "fax", "email", "e-mail", "buyer code", "remit to", "tax id", "ship via",
    "f.o.b", "this contract is effective", "part description", "drawing number",
    "reason for issuing", "sample required", "hazardous material", "engineer change",
    "payment terms", "freight terms", "delivery terms", "daily capacity",
    "hours per day", "container type", "all prices", "base price", "total price",
)

# Block capture stops at a line containing one of these, unless the label itself names it
SECTION_STOP_TERMS = (
    ("mailing address", "mailing"),
    ("purchasing contact", "purchasing contact"),
    ("affected p/n", None),
    ("affected part", None),
)

LEGAL_OPENINGS = (
    "is to correct", "to obtain or retain", "of the other for any", "may, in writing",
    "that is an ingredient", "specified in this contract", "is firm and not subject",
    "this contract is effective",
)

LEGAL_MARKERS = (
    "electronic data interchange", "noncompliance", "periodically", "warranty",
    "infringement",
)

LEGAL_TERMS = (
    "agreement", "contract", "whereas", "hereto", "hereby", "indemnify", "liability",
    "warrant", "provision", "statute", "govern", "law", "accordance", "behalf",
    "execution", "force", "majeure", "perform", "obligations", "terms and conditions",
)

# Substrings showing a captured value drifted into prose or into another label
INVALID_VALUE_FRAGMENTS = (
    "forecasted", "quantity", "comply", "reference", "incorporated", "amended",
    "utilizing", "expressly", "agreed", "between", "pursuant", "supplier capacity",
    "capacity to", "change the", "refer to", "authorized by", "electronically",
    "name and address", "name & address", "buyer name", "seller name",
    "shipping address", "purchasing contact", "periodically", "noncompliance",
    "warranty", "breach", "indemnification", "obligations",
)

PLACEHOLDER_VALUES = (
    "and address", "and address:", "name and address", "information", "information:",
)

# Words that mark the text before an early colon as a leftover label
LABEL_HINT_WORDS = (
    "issuing", "reason", "contract", "amendment", "date", "price", "prix", "precio",
    "fecha", "datum",
)

CURRENCY_CODES = ("USD", "EUR", "GBP", "CNY", "JPY", "CAD", "MXN", "AUD")

CURRENCY_SYMBOLS = (("$", "USD"), ("€", "EUR"))
