"""Subset of the DICOM data dictionary from Part 6 of the DICOM Standard"""

# Each dict entry is Tag: (VR, VM, Name, Retired, Keyword)
# Restricted to the File Meta Information group and the elements needed to
# identify and render an image
DicomDictionary = {
    0x00020000: ('UL', '1', "File Meta Information Group Length", '', 'FileMetaInformationGroupLength'),  # noqa
    0x00020001: ('OB', '1', "File Meta Information Version", '', 'FileMetaInformationVersion'),  # noqa
    0x00020002: ('UI', '1', "Media Storage SOP Class UID", '', 'MediaStorageSOPClassUID'),  # noqa
    0x00020003: ('UI', '1', "Media Storage SOP Instance UID", '', 'MediaStorageSOPInstanceUID'),  # noqa
    0x00020010: ('UI', '1', "Transfer Syntax UID", '', 'TransferSyntaxUID'),  # noqa
    0x00020012: ('UI', '1', "Implementation Class UID", '', 'ImplementationClassUID'),  # noqa
    0x00020013: ('SH', '1', "Implementation Version Name", '', 'ImplementationVersionName'),  # noqa
    0x00020016: ('AE', '1', "Source Application Entity Title", '', 'SourceApplicationEntityTitle'),  # noqa
    0x00020100: ('UI', '1', "Private Information Creator UID", '', 'PrivateInformationCreatorUID'),  # noqa
    0x00020102: ('OB', '1', "Private Information", '', 'PrivateInformation'),  # noqa
    0x00080005: ('CS', '1-n', "Specific Character Set", '', 'SpecificCharacterSet'),  # noqa
    0x00080008: ('CS', '2-n', "Image Type", '', 'ImageType'),  # noqa
    0x00080012: ('DA', '1', "Instance Creation Date", '', 'InstanceCreationDate'),  # noqa
    0x00080013: ('TM', '1', "Instance Creation Time", '', 'InstanceCreationTime'),  # noqa
    0x00080016: ('UI', '1', "SOP Class UID", '', 'SOPClassUID'),  # noqa
    0x00080018: ('UI', '1', "SOP Instance UID", '', 'SOPInstanceUID'),  # noqa
    0x00080020: ('DA', '1', "Study Date", '', 'StudyDate'),  # noqa
    0x00080021: ('DA', '1', "Series Date", '', 'SeriesDate'),  # noqa
    0x00080022: ('DA', '1', "Acquisition Date", '', 'AcquisitionDate'),  # noqa
    0x00080023: ('DA', '1', "Content Date", '', 'ContentDate'),  # noqa
    0x00080030: ('TM', '1', "Study Time", '', 'StudyTime'),  # noqa
    0x00080031: ('TM', '1', "Series Time", '', 'SeriesTime'),  # noqa
    0x00080033: ('TM', '1', "Content Time", '', 'ContentTime'),  # noqa
    0x00080050: ('SH', '1', "Accession Number", '', 'AccessionNumber'),  # noqa
    0x00080060: ('CS', '1', "Modality", '', 'Modality'),  # noqa
    0x00080064: ('CS', '1', "Conversion Type", '', 'ConversionType'),  # noqa
    0x00080070: ('LO', '1', "Manufacturer", '', 'Manufacturer'),  # noqa
    0x00080080: ('LO', '1', "Institution Name", '', 'InstitutionName'),  # noqa
    0x00080090: ('PN', '1', "Referring Physician's Name", '', 'ReferringPhysicianName'),  # noqa
    0x00080100: ('SH', '1', "Code Value", '', 'CodeValue'),  # noqa
    0x00080102: ('SH', '1', "Coding Scheme Designator", '', 'CodingSchemeDesignator'),  # noqa
    0x00080104: ('LO', '1', "Code Meaning", '', 'CodeMeaning'),  # noqa
    0x00081030: ('LO', '1', "Study Description", '', 'StudyDescription'),  # noqa
    0x0008103E: ('LO', '1', "Series Description", '', 'SeriesDescription'),  # noqa
    0x00081090: ('LO', '1', "Manufacturer's Model Name", '', 'ManufacturerModelName'),  # noqa
    0x00081140: ('SQ', '1', "Referenced Image Sequence", '', 'ReferencedImageSequence'),  # noqa
    0x00081150: ('UI', '1', "Referenced SOP Class UID", '', 'ReferencedSOPClassUID'),  # noqa
    0x00081155: ('UI', '1', "Referenced SOP Instance UID", '', 'ReferencedSOPInstanceUID'),  # noqa
    0x00082112: ('SQ', '1', "Source Image Sequence", '', 'SourceImageSequence'),  # noqa
    0x00100010: ('PN', '1', "Patient's Name", '', 'PatientName'),  # noqa
    0x00100020: ('LO', '1', "Patient ID", '', 'PatientID'),  # noqa
    0x00100030: ('DA', '1', "Patient's Birth Date", '', 'PatientBirthDate'),  # noqa
    0x00100040: ('CS', '1', "Patient's Sex", '', 'PatientSex'),  # noqa
    0x00101010: ('AS', '1', "Patient's Age", '', 'PatientAge'),  # noqa
    0x00180015: ('CS', '1', "Body Part Examined", '', 'BodyPartExamined'),  # noqa
    0x00180050: ('DS', '1', "Slice Thickness", '', 'SliceThickness'),  # noqa
    0x00180060: ('DS', '1', "KVP", '', 'KVP'),  # noqa
    0x00181020: ('LO', '1-n', "Software Versions", '', 'SoftwareVersions'),  # noqa
    0x00185100: ('CS', '1', "Patient Position", '', 'PatientPosition'),  # noqa
    0x0020000D: ('UI', '1', "Study Instance UID", '', 'StudyInstanceUID'),  # noqa
    0x0020000E: ('UI', '1', "Series Instance UID", '', 'SeriesInstanceUID'),  # noqa
    0x00200010: ('SH', '1', "Study ID", '', 'StudyID'),  # noqa
    0x00200011: ('IS', '1', "Series Number", '', 'SeriesNumber'),  # noqa
    0x00200013: ('IS', '1', "Instance Number", '', 'InstanceNumber'),  # noqa
    0x00200020: ('CS', '2', "Patient Orientation", '', 'PatientOrientation'),  # noqa
    0x00200032: ('DS', '3', "Image Position (Patient)", '', 'ImagePositionPatient'),  # noqa
    0x00200037: ('DS', '6', "Image Orientation (Patient)", '', 'ImageOrientationPatient'),  # noqa
    0x00200052: ('UI', '1', "Frame of Reference UID", '', 'FrameOfReferenceUID'),  # noqa
    0x00201041: ('DS', '1', "Slice Location", '', 'SliceLocation'),  # noqa
    0x00280002: ('US', '1', "Samples per Pixel", '', 'SamplesPerPixel'),  # noqa
    0x00280004: ('CS', '1', "Photometric Interpretation", '', 'PhotometricInterpretation'),  # noqa
    0x00280006: ('US', '1', "Planar Configuration", '', 'PlanarConfiguration'),  # noqa
    0x00280008: ('IS', '1', "Number of Frames", '', 'NumberOfFrames'),  # noqa
    0x00280009: ('AT', '1-n', "Frame Increment Pointer", '', 'FrameIncrementPointer'),  # noqa
    0x00280010: ('US', '1', "Rows", '', 'Rows'),  # noqa
    0x00280011: ('US', '1', "Columns", '', 'Columns'),  # noqa
    0x00280030: ('DS', '2', "Pixel Spacing", '', 'PixelSpacing'),  # noqa
    0x00280034: ('IS', '2', "Pixel Aspect Ratio", '', 'PixelAspectRatio'),  # noqa
    0x00280100: ('US', '1', "Bits Allocated", '', 'BitsAllocated'),  # noqa
    0x00280101: ('US', '1', "Bits Stored", '', 'BitsStored'),  # noqa
    0x00280102: ('US', '1', "High Bit", '', 'HighBit'),  # noqa
    0x00280103: ('US', '1', "Pixel Representation", '', 'PixelRepresentation'),  # noqa
    0x00280106: ('US or SS', '1', "Smallest Image Pixel Value", '', 'SmallestImagePixelValue'),  # noqa
    0x00280107: ('US or SS', '1', "Largest Image Pixel Value", '', 'LargestImagePixelValue'),  # noqa
    0x00280301: ('CS', '1', "Burned In Annotation", '', 'BurnedInAnnotation'),  # noqa
    0x00281050: ('DS', '1-n', "Window Center", '', 'WindowCenter'),  # noqa
    0x00281051: ('DS', '1-n', "Window Width", '', 'WindowWidth'),  # noqa
    0x00281052: ('DS', '1', "Rescale Intercept", '', 'RescaleIntercept'),  # noqa
    0x00281053: ('DS', '1', "Rescale Slope", '', 'RescaleSlope'),  # noqa
    0x00281054: ('LO', '1', "Rescale Type", '', 'RescaleType'),  # noqa
    0x00281055: ('LO', '1-n', "Window Center & Width Explanation", '', 'WindowCenterWidthExplanation'),  # noqa
    0x00281056: ('CS', '1', "VOI LUT Function", '', 'VOILUTFunction'),  # noqa
    0x00281101: ('US or SS', '3', "Red Palette Color Lookup Table Descriptor", '', 'RedPaletteColorLookupTableDescriptor'),  # noqa
    0x00281102: ('US or SS', '3', "Green Palette Color Lookup Table Descriptor", '', 'GreenPaletteColorLookupTableDescriptor'),  # noqa
    0x00281103: ('US or SS', '3', "Blue Palette Color Lookup Table Descriptor", '', 'BluePaletteColorLookupTableDescriptor'),  # noqa
    0x00281199: ('UI', '1', "Palette Color Lookup Table UID", '', 'PaletteColorLookupTableUID'),  # noqa
    0x00281201: ('OW', '1', "Red Palette Color Lookup Table Data", '', 'RedPaletteColorLookupTableData'),  # noqa
    0x00281202: ('OW', '1', "Green Palette Color Lookup Table Data", '', 'GreenPaletteColorLookupTableData'),  # noqa
    0x00281203: ('OW', '1', "Blue Palette Color Lookup Table Data", '', 'BluePaletteColorLookupTableData'),  # noqa
    0x00282110: ('CS', '1', "Lossy Image Compression", '', 'LossyImageCompression'),  # noqa
    0x00282112: ('DS', '1-n', "Lossy Image Compression Ratio", '', 'LossyImageCompressionRatio'),  # noqa
    0x00282114: ('CS', '1-n', "Lossy Image Compression Method", '', 'LossyImageCompressionMethod'),  # noqa
    0x00283000: ('SQ', '1', "Modality LUT Sequence", '', 'ModalityLUTSequence'),  # noqa
    0x00283002: ('US or SS', '3', "LUT Descriptor", '', 'LUTDescriptor'),  # noqa
    0x00283003: ('LO', '1', "LUT Explanation", '', 'LUTExplanation'),  # noqa
    0x00283004: ('LO', '1', "Modality LUT Type", '', 'ModalityLUTType'),  # noqa
    0x00283006: ('US or OW', '1-n', "LUT Data", '', 'LUTData'),  # noqa
    0x00283010: ('SQ', '1', "VOI LUT Sequence", '', 'VOILUTSequence'),  # noqa
    0x00409096: ('SQ', '1', "Real World Value Mapping Sequence", '', 'RealWorldValueMappingSequence'),  # noqa
    0x00880140: ('UI', '1', "Storage Media File-set UID", '', 'StorageMediaFileSetUID'),  # noqa
    0x52009229: ('SQ', '1', "Shared Functional Groups Sequence", '', 'SharedFunctionalGroupsSequence'),  # noqa
    0x52009230: ('SQ', '1', "Per-frame Functional Groups Sequence", '', 'PerFrameFunctionalGroupsSequence'),  # noqa
    0x7FE00001: ('OV', '1', "Extended Offset Table", '', 'ExtendedOffsetTable'),  # noqa
    0x7FE00002: ('OV', '1', "Extended Offset Table Lengths", '', 'ExtendedOffsetTableLengths'),  # noqa
    0x7FE00008: ('OF', '1', "Float Pixel Data", '', 'FloatPixelData'),  # noqa
    0x7FE00009: ('OD', '1', "Double Float Pixel Data", '', 'DoubleFloatPixelData'),  # noqa
    0x7FE00010: ('OB or OW', '1', "Pixel Data", '', 'PixelData'),  # noqa
    0xFFFAFFFA: ('SQ', '1', "Digital Signatures Sequence", '', 'DigitalSignaturesSequence'),  # noqa
    0xFFFCFFFC: ('OB', '1', "Data Set Trailing Padding", '', 'DataSetTrailingPadding'),  # noqa
    0xFFFEE000: ('NONE', '1', "Item", '', 'Item'),  # noqa
    0xFFFEE00D: ('NONE', '1', "Item Delimitation Item", '', 'ItemDelimitationItem'),  # noqa
    0xFFFEE0DD: ('NONE', '1', "Sequence Delimitation Item", '', 'SequenceDelimitationItem'),  # noqa
}
